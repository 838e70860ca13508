from scripts.init_db import seed_demo
from sqlalchemy import create_engine, func, select

from app.crm.modules.customers.models import Customer
from app.crm.modules.feedback.models import Feedback


def test_seed_is_idempotent(tmp_path):
    url = f"sqlite:///{tmp_path/'seed.db'}"
    seed_demo(database_url=url)
    seed_demo(database_url=url)

    engine = create_engine(url, future=True)
    with engine.connect() as conn:
        assert conn.execute(select(func.count()).select_from(Customer)).scalar_one() == 4
        assert conn.execute(select(func.count()).select_from(Feedback)).scalar_one() == 3
        statuses = conn.execute(select(Feedback.status)).scalars().all()
    assert set(statuses) == {"pending"}
