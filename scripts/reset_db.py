# scripts/reset_db.py
import sys
import os
import shutil

# Add project root to Python path
sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from chatplatform.config import UPLOADS
from chatplatform.db.init_db import reset_database as drop_and_create
from chatplatform.db.session import init_db_engine


def reset_database(keep_uploads: bool = False):
    print("WARNING: This will DELETE all data in the database.")

    active_engine = init_db_engine()
    print(f"   Database: {active_engine.url.render_as_string(hide_password=True)}")

    print("   Dropping and recreating tables...")
    drop_and_create()

    if not keep_uploads and os.path.isdir(UPLOADS.upload_dir):
        print(f"   Removing uploaded files in {UPLOADS.upload_dir}...")
        shutil.rmtree(UPLOADS.upload_dir)

    print("Database successfully reset!")


if __name__ == "__main__":
    reset_database(keep_uploads="--keep-uploads" in sys.argv)
