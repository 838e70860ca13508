import sys
from pathlib import Path
import os
from datetime import datetime

from sqlalchemy import create_engine
from sqlalchemy.orm import Session
from contextlib import contextmanager

# Ensure repo root is on sys.path when running as a script.
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from app.crm.db import engine_kwargs_for, make_sessionmaker
from app.crm.models import Base
from app.crm.modules.customers.models import Customer
from app.crm.modules.feedback.models import Feedback


DEMO_CUSTOMERS = [
    dict(name="John Smith", email="john.smith@techcorp.com", phone="(555) 123-4567", company="Tech Corp",
         status="active", price=1499.99, has_paid=True, paid_date=datetime(2024, 2, 15),
         software_url="https://app.techcorp.com/dashboard", notes="Enterprise customer - Priority support"),
    dict(name="Sarah Johnson", email="sarah@innovatesolutions.com", phone="(555) 234-5678",
         company="Innovate Solutions", status="active", price=999.99, has_paid=False,
         software_url="https://portal.innovatesolutions.com", notes="New customer - Implementation in progress"),
    dict(name="Michael Chen", email="mchen@globaltech.com", phone="(555) 345-6789", company="Global Tech Industries",
         status="active", price=2499.99, has_paid=True, paid_date=datetime(2024, 1, 20),
         software_url="https://globaltech.app/dashboard", notes="Multiple licenses - Custom integration"),
    dict(name="Emma Wilson", email="emma@startupinc.co", phone="(555) 456-7890", company="Startup Inc",
         status="inactive", price=499.99, has_paid=True, paid_date=datetime(2023, 12, 1),
         notes="Subscription paused - Will review in Q2"),
]

DEMO_FEEDBACK = [
    dict(type="bug_report", priority="high", title="Invoice PDF is blank",
         description="Downloading an invoice produces an empty PDF.", user_name="Sarah Johnson",
         user_email="sarah@innovatesolutions.com", user_role="admin"),
    dict(type="feature_request", priority="medium", title="Calendar sync",
         description="Sync scheduled jobs to Google Calendar.", user_name="John Smith",
         user_email="john.smith@techcorp.com"),
    dict(type="general_feedback", priority="low", title="Great onboarding",
         description="Setup took ten minutes.", user_name="Michael Chen", user_email="mchen@globaltech.com"),
]


@contextmanager
def _session_scope(database_url: str):
    engine = create_engine(database_url, **engine_kwargs_for(database_url))
    Base.metadata.create_all(bind=engine)
    sm = make_sessionmaker(engine)
    s: Session = sm()
    try:
        yield s
        s.commit()
    except Exception:
        s.rollback()
        raise
    finally:
        s.close()


def seed_demo(*, database_url: str | None = None) -> None:
    """
    Create tables and seed demo customers/feedback in an idempotent way.
    Existing rows (matched by email / title) are left untouched.
    """
    db_url = (database_url or os.environ.get("DATABASE_URL") or "sqlite:///crm.db").strip()

    with _session_scope(db_url) as s:
        added = 0
        for row in DEMO_CUSTOMERS:
            if not s.query(Customer).filter(Customer.email == row["email"]).one_or_none():
                s.add(Customer(**row))
                added += 1
        for row in DEMO_FEEDBACK:
            if not s.query(Feedback).filter(Feedback.title == row["title"]).one_or_none():
                s.add(Feedback(status="pending", **row))
                added += 1

    print(f"Initialized database; added {added} demo rows.")


def main() -> None:
    seed_demo(database_url=None)


if __name__ == "__main__":
    main()
