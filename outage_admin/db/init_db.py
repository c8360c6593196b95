from __future__ import annotations

from datetime import datetime, timedelta

from sqlalchemy import select
from sqlalchemy.orm import Session

from outage_admin.dates import local_today
from outage_admin.db.base import Base
from outage_admin.db.session import SessionLocal, engine
from outage_admin.models.org import Branch, Transformer, WorkCenter
from outage_admin.models.outage import OMSStatus, PowerOutageRequest, RequestStatus
from outage_admin.models.user import User, UserStatus
from outage_admin.security.passwords import hash_password
from outage_admin.settings import get_settings


def init_db() -> None:
    """
    Create tables + seed demo data.

    Small and deterministic so the role behaviour can be tried without setup.
    Every seeded account uses the password ``password``.
    """

    Base.metadata.create_all(bind=engine)

    with SessionLocal() as db:
        if _has_seed_data(db):
            return
        _seed(db, rounds=get_settings().bcrypt_rounds)


def _has_seed_data(db: Session) -> bool:
    return db.execute(select(WorkCenter.id).limit(1)).first() is not None


def _seed(db: Session, rounds: int) -> None:
    # Work centers and branches
    north = WorkCenter(name="Center A")
    south = WorkCenter(name="Center B")
    db.add_all([north, south])
    db.flush()

    b1 = Branch(work_center_id=north.id, full_name="Branch X District Office", short_name="Branch X", phone_number="053-000-001")
    b2 = Branch(work_center_id=north.id, full_name="Branch Y District Office", short_name="Branch Y", phone_number="053-000-002")
    b3 = Branch(work_center_id=south.id, full_name="Branch Z District Office", short_name="Branch Z", phone_number="074-000-003")
    db.add_all([b1, b2, b3])
    db.flush()

    db.add_all(
        [
            Transformer(transformer_number="TR-0001", gis_details="Pole 12, Main Road"),
            Transformer(transformer_number="TR-0002", gis_details="Pole 40, Market Street"),
            Transformer(transformer_number="TR-0101", gis_details="Pole 3, Harbour Lane"),
        ]
    )

    # Users, one per role
    password_hash = hash_password("password", rounds=rounds)
    admin = User(employee_id="100001", full_name="Alice Admin", role="ADMIN", work_center_id=north.id, branch_id=b1.id, password_hash=password_hash)
    manager = User(employee_id="100002", full_name="Mona Manager", role="MANAGER", work_center_id=north.id, branch_id=b1.id, password_hash=password_hash)
    supervisor = User(employee_id="100003", full_name="Sam Supervisor", role="SUPERVISOR", work_center_id=north.id, branch_id=b2.id, password_hash=password_hash)
    user = User(employee_id="100004", full_name="Uma User", role="USER", work_center_id=north.id, branch_id=b2.id, password_hash=password_hash)
    viewer = User(employee_id="100005", full_name="Vic Viewer", role="VIEWER", work_center_id=south.id, branch_id=b3.id, password_hash=password_hash)
    south_user = User(
        employee_id="100006",
        full_name="Sia South",
        role="USER",
        status=UserStatus.ACTIVE,
        work_center_id=south.id,
        branch_id=b3.id,
        password_hash=password_hash,
    )
    db.add_all([admin, manager, supervisor, user, viewer, south_user])
    db.flush()

    # Outage requests
    today = local_today()

    def _request(creator: User, branch: Branch, days_ahead: int, transformer: str, **kwargs) -> PowerOutageRequest:
        day = today + timedelta(days=days_ahead)
        return PowerOutageRequest(
            outage_date=day,
            start_time=datetime.combine(day, datetime.min.time()).replace(hour=9),
            end_time=datetime.combine(day, datetime.min.time()).replace(hour=12),
            work_center_id=branch.work_center_id,
            branch_id=branch.id,
            transformer_number=transformer,
            gis_details="",
            area="Village 4",
            created_by_id=creator.id,
            **kwargs,
        )

    db.add_all(
        [
            _request(user, b2, 20, "TR-0001"),
            _request(user, b2, 12, "TR-0002", status_request=RequestStatus.CONFIRM),
            _request(supervisor, b1, 4, "TR-0001", status_request=RequestStatus.CONFIRM),
            _request(
                manager,
                b1,
                -3,
                "TR-0002",
                status_request=RequestStatus.CONFIRM,
                oms_status=OMSStatus.PROCESSED,
            ),
            _request(south_user, b3, 15, "TR-0101"),
        ]
    )

    db.commit()
