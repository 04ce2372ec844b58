#!/usr/bin/env python3
"""
Connection Test Script

Run this to verify the MongoDB connection and indexes.
Usage: python scripts/check_connections.py
"""
from jobportal.core.config import get_settings
from jobportal.db.mongodb import init_mongo_indexes, test_mongo_connection


def main():
    settings = get_settings()
    print("=" * 50)
    print("JOB PORTAL - CONNECTION TEST")
    print("=" * 50)

    print("\n[1] Testing MongoDB...")
    print(f"    URI: {settings.mongodb_uri}")
    print(f"    Database: {settings.mongodb_db}")
    if not test_mongo_connection():
        print("    ❌ MongoDB: FAILED")
        return 1
    print("    ✅ MongoDB: CONNECTED")

    print("\n[2] Ensuring indexes...")
    init_mongo_indexes()
    print("    ✅ Indexes ready (including one application per job seeker per job)")

    print("\n" + "=" * 50)
    print("Connection test complete!")
    print("=" * 50)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
