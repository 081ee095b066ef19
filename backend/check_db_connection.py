"""
Check the database connection before starting the app.
Run this to verify the store is reachable and has the tables the analytics read.
"""
import os
from sqlalchemy import create_engine, inspect, text
from dotenv import load_dotenv

# Load environment variables
load_dotenv()

DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./progress.db")
REQUIRED_TABLES = {"profiles", "weight_entries"}

print("🔍 Testing Database Connection...")
print()

try:
    engine = create_engine(DATABASE_URL, echo=False)

    with engine.connect() as connection:
        connection.execute(text("SELECT 1"))
        print("✅ Database connection successful!")
        print()

        tables = set(inspect(connection).get_table_names())
        missing = REQUIRED_TABLES - tables
        for table in sorted(REQUIRED_TABLES):
            mark = "❌" if table in missing else "✅"
            print(f"   {mark} {table}")

        print()
        if missing:
            print(f"📊 Missing tables: {', '.join(sorted(missing))} (created on first run for local SQLite)")
        else:
            print("✨ Your database is ready to use!")
        print("🚀 You can now start the backend: uvicorn progress.main:app --reload")

except Exception as e:
    print("❌ Database connection failed!")
    print(f"Error: {str(e)}")
    print()
    print("📝 Troubleshooting:")
    print("   1. Check that the database server is running")
    print("   2. Verify DATABASE_URL in the .env file")
    print("   3. Check firewall/network settings")
