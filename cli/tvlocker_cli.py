# cli/tvlocker_cli.py
# Local CLI to register, lock and inspect devices (uses DB directly)
import argparse
import sys

from tvlocker.database import create_db_engine, make_session_factory
from tvlocker.errors import LifecycleError
from tvlocker.lifecycle import DeviceLifecycle
from tvlocker.models import ALLOWED_TERM_DURATIONS, Base
from tvlocker.store import DeviceStore


def print_terms(terms):
    for t in terms:
        print(f"  term {t['term']:>3}  locks {t['lock_date']}  code {t['activation_code']}")


def run(args, lifecycle: DeviceLifecycle):
    if args.action == "register":
        device_id, terms = lifecycle.register(
            serial_number=args.serial,
            customer_name=args.customer,
            phone_number=args.phone,
            emi_term=args.terms,
            emi_start_date=args.start,
            term_duration=args.duration,
        )
        print("Device registered:", device_id)
        print_terms(terms)
    elif args.action == "lock":
        lifecycle.set_remote_lock(args.serial, True)
        print("Device locked:", args.serial)
    elif args.action == "release":
        lifecycle.set_remote_lock(args.serial, False)
        print("Remote lock released:", args.serial)
    elif args.action == "unlock":
        lifecycle.unlock(args.serial)
        print("Device unlocked and deactivated:", args.serial)
    else:
        info = lifecycle.describe(args.serial)
        print(f"{info['serial_number']} ({info['customer_name']}, {info['phone_number']})")
        print(f"  active: {info['is_active']}  locked: {info['is_locked']}  remote lock: {info['remote_locked']}")
        print(f"  {info['emi_term']} terms of {info['term_duration']} days from {info['emi_start_date']}")
        print_terms(info["terms"])


def build_parser():
    parser = argparse.ArgumentParser()
    parser.add_argument("action", choices=["register", "lock", "release", "unlock", "show"])
    parser.add_argument("--serial", required=True, help="Device serial number")
    parser.add_argument("--customer", help="Customer name (for register)")
    parser.add_argument("--phone", help="Phone number (for register)")
    parser.add_argument("--terms", type=int, default=1, help="Number of EMI terms")
    parser.add_argument("--start", help="EMI start date YYYY-MM-DD (for register)")
    parser.add_argument("--duration", type=int, default=30, choices=ALLOWED_TERM_DURATIONS, help="Term duration in days")
    parser.add_argument("--database-url", help="Overrides DATABASE_URL")
    return parser


def main(argv=None):
    args = build_parser().parse_args(argv)

    if args.action == "register" and not (args.customer and args.phone and args.start):
        print("customer, phone and start required for register")
        return 1

    engine = create_db_engine(args.database_url)
    Base.metadata.create_all(bind=engine)
    db = make_session_factory(engine)()
    try:
        run(args, DeviceLifecycle(DeviceStore(db)))
    except LifecycleError as e:
        print("Error:", e.message)
        return 1
    finally:
        db.close()
    return 0


if __name__ == "__main__":
    sys.exit(main())
