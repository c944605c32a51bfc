# backend/seed.py
# Reset the database and load demo data
# Run: python -m backend.seed
#
# WARNING: deletes every user and project before seeding.

import random
import sys
from datetime import date, timedelta
from pathlib import Path
from typing import Any, Dict, List, Optional

# Add project root to path for imports
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from backend import store
from backend.migrate import run_migrations
from backend.models import ProjectStatus, UserRole
from backend.security import hash_password

DEMO_PASSWORD = "password123"

TEAM_MEMBERS = [
    "Alice Johnson",
    "Bob Smith",
    "Charlie Brown",
    "Diana Ross",
    "Edward Chen",
    "Fiona Williams",
    "George Miller",
    "Hannah Davis",
]

PROJECT_NAMES = [
    "Website Redesign",
    "Mobile App Development",
    "Cloud Migration",
    "Data Analytics Platform",
    "Customer Portal",
    "API Integration",
    "Security Audit",
    "E-commerce Platform",
    "CRM Implementation",
    "Marketing Automation",
    "DevOps Pipeline",
    "Machine Learning Model",
]

STATUSES = [ProjectStatus.ACTIVE, ProjectStatus.ON_HOLD, ProjectStatus.COMPLETED]


def random_date(start: date, end: date, rng: random.Random) -> date:
    return start + timedelta(days=rng.randint(0, (end - start).days))


def random_budget(rng: random.Random) -> float:
    """$5,000 - $100,000 in $100 increments."""
    return float(rng.randrange(5_000, 100_001, 100))


def build_projects(today: date, rng: random.Random) -> List[Dict[str, Any]]:
    """Sample projects; completed ones get past deadlines, the rest future ones."""
    projects = []
    for i, name in enumerate(PROJECT_NAMES):
        status = STATUSES[i % len(STATUSES)]
        if status == ProjectStatus.COMPLETED:
            deadline = random_date(today - timedelta(days=90), today, rng)
        else:
            deadline = random_date(today, today + timedelta(days=180), rng)
        projects.append({
            "name": name,
            "description": f"This is the {name.lower()} project. It involves multiple phases and deliverables.",
            "status": status,
            "deadline": deadline.isoformat(),
            "team_member": rng.choice(TEAM_MEMBERS),
            "budget": random_budget(rng),
        })
    return projects


def seed(rng: Optional[random.Random] = None) -> Dict[str, int]:
    """
    Wipe users/projects, create a demo user and an admin user, then split the
    sample projects 8/4 between them.

    Returns:
        Counts of created users and projects
    """
    rng = rng or random.Random()

    print("[SEED] Starting database seed...")
    run_migrations()
    store.delete_all()

    password_hash = hash_password(DEMO_PASSWORD)
    demo = store.create_user("demo@example.com", "Demo User", password_hash, UserRole.USER)
    print(f"[SEED] Created demo user: {demo.email}")
    admin = store.create_user("admin@example.com", "Admin User", password_hash, UserRole.ADMIN)
    print(f"[SEED] Created admin user: {admin.email}")

    projects = build_projects(date.today(), rng)
    for i, data in enumerate(projects):
        owner = demo if i < 8 else admin
        store.create_project(owner.id, data)

    print(f"[SEED] Created {len(projects)} sample projects")
    print("[SEED] Demo credentials:  demo@example.com / password123")
    print("[SEED] Admin credentials: admin@example.com / password123")
    return {"users": 2, "projects": len(projects)}


if __name__ == "__main__":
    try:
        seed()
    except Exception as e:
        print(f"[SEED] Seeding failed: {e}")
        sys.exit(1)
