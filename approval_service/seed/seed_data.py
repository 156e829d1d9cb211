import argparse
import getpass

from sqlalchemy.orm import Session

from approval_service.db.session import init_db, session_scope
from approval_service.domains.auth.router import hash_password
from approval_service.models import Supervisor
from timecard.core.logging import configure_logging, get_logger

logger = get_logger(__name__)


def seed(session: Session, username: str, name: str, password: str) -> Supervisor:
    supervisor = session.query(Supervisor).filter(Supervisor.username == username).one_or_none()
    if supervisor is None:
        supervisor = Supervisor(username=username, name=name, hashed_password=hash_password(password))
        session.add(supervisor)
    else:
        supervisor.name = name
        supervisor.hashed_password = hash_password(password)
    session.flush()
    logger.info("supervisor_seeded", username=username, id=supervisor.id)
    return supervisor


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(description="Create or update a supervisor account")
    parser.add_argument("username")
    parser.add_argument("name")
    parser.add_argument("--password")
    args = parser.parse_args(argv)

    configure_logging("INFO")
    password = args.password or getpass.getpass("Password: ")
    init_db()
    with session_scope() as session:
        supervisor = seed(session, args.username, args.name, password)
        print(f"Supervisor {supervisor.id} ({supervisor.username}) ready")


if __name__ == "__main__":
    main()
