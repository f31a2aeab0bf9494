import sys
from pathlib import Path

# Add backend directory to path so we can import app modules
backend_dir = Path(__file__).resolve().parent
sys.path.append(str(backend_dir))

from dotenv import load_dotenv
load_dotenv()

from app.config import get_config
from app.db.mongo import get_database, new_id
from app.db.roles import seed_roles
from app.schemas.users import GLOBAL_PROJECT
from app.services.auth_service import AuthService
from app.utils.datetime_utils import get_now_utc


def create_initial_admin():
    print("--- Create Initial Admin User ---")

    default_email = "admin@example.com"

    if len(sys.argv) > 1:
        email = sys.argv[1].lower()
    else:
        print("Using defaults (Run with: python create_initial_admin.py <email>)")
        email = default_email

    config = get_config()
    db = get_database(config)

    print("Seeding roles...")
    print(f"  {seed_roles(db)} new role(s)")

    user = db.users.find_one({"emails.address": email})
    if user:
        print(f"⚠️  User with email {email} already exists.")
    else:
        user = {
            "_id": new_id(),
            "emails": [{"address": email, "verified": True}],
            "profile": {"firstName": "System", "lastName": "Admin"},
            "roles": [{"roles": ["global-admin"], "project": GLOBAL_PROJECT}],
            "createdAt": get_now_utc().isoformat(),
        }
        db.users.insert_one(user)
        print(f"✅ Success! Admin user created: {email}")

    token = AuthService(config).generate_token(user["_id"], email=email)
    print(f"Bearer token: {token}")


if __name__ == "__main__":
    create_initial_admin()
