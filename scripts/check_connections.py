#!/usr/bin/env python3
"""
Connection Check Script

Run this to verify the MongoDB connection and index setup.
Usage: python scripts/check_connections.py
"""
import sys
sys.path.insert(0, '.')

from careerhub.core.config import get_settings
from careerhub.db.mongodb import init_mongo_indexes, test_mongo_connection


def main():
    settings = get_settings()
    print("=" * 50)
    print("CAREERHUB - CONNECTION CHECK")
    print("=" * 50)

    print("\n[1] Checking MongoDB...")
    print(f"    URI: {settings.mongodb_uri}")
    print(f"    Database: {settings.mongodb_db}")
    if not test_mongo_connection():
        print("    ❌ MongoDB: FAILED")
        sys.exit(1)
    print("    ✅ MongoDB: CONNECTED")

    print("\n[2] Creating indexes...")
    init_mongo_indexes()
    print("    ✅ Indexes ready")

    print("\n[3] Media uploads...")
    if settings.media_cloud_name and settings.media_api_key and settings.media_api_secret:
        print(f"    ✅ Cloud: {settings.media_cloud_name}, folders: {', '.join(settings.media_folder_list)}")
    else:
        print("    ⚠️  Media credentials not configured (uploads disabled)")

    print("\n" + "=" * 50)
    print("Connection check complete!")
    print("=" * 50)


if __name__ == "__main__":
    main()
