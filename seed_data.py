#!/usr/bin/env python3

from busticket.database import SessionLocal, init_db
from busticket.dependencies import get_qr_encoder
from busticket.fleet.seed import seed_reference_data

def create_seed_data():
    init_db()
    db = SessionLocal()

    try:
        print("🚀 Creating seed data for Bengaluru Bus System...")
        result = seed_reference_data(db, get_qr_encoder())
        print("✅ Successfully created seed data!")
        print(f"Created:")
        print(f"  - {result['stops_count']} bus stops")
        print(f"  - {result['buses_count']} buses")
        print(f"  - sample user {result['sample_user_id']}")
        print(f"  - sample ticket {result['sample_ticket_id']}")
    except Exception as e:
        print(f"❌ Error creating seed data: {e}")
        raise
    finally:
        db.close()

if __name__ == "__main__":
    create_seed_data()
