#!/usr/bin/env python3
"""Interactive setup helper for Booking Calendar configuration."""

import sys
from pathlib import Path


def main():
    print("\n" + "=" * 70)
    print("📅 Booking Calendar - Configuration Setup")
    print("=" * 70 + "\n")

    env_file = Path(".env")

    if env_file.exists():
        response = input("⚠️  .env file already exists. Overwrite? (y/N): ")
        if response.lower() != 'y':
            print("Setup cancelled.")
            return

    print("Let's connect the calendar to your Supabase project.\n")
    print("The URL and service role key are under Project Settings > API.")
    print()

    print("─" * 70)
    print("Supabase Configuration")
    print("─" * 70)

    supabase_url = input("\nSupabase URL (e.g., https://abcd.supabase.co): ").strip().rstrip("/")
    service_key = input("Service role key: ").strip()
    schema = input("Database schema (press Enter for 'public'): ").strip() or "public"

    print("\n" + "─" * 70)
    print("Calendar Settings")
    print("─" * 70)

    timezone = input("\nBusiness timezone (press Enter for 'UTC'): ").strip() or "UTC"
    window_days = input("Statistics lookahead in days (press Enter for 30): ").strip() or "30"

    env_content = f"""# Supabase Configuration
SUPABASE_URL={supabase_url}
SUPABASE_SERVICE_ROLE_KEY={service_key}
SUPABASE_SCHEMA={schema}

# Logging Configuration
LOG_LEVEL=INFO
LOG_FILE=booking_calendar.log

# Calendar Configuration
FETCH_TIMEOUT_SECONDS=10
STATS_WINDOW_DAYS={window_days}
BUSINESS_TIMEZONE={timezone}
"""

    with open(".env", "w") as f:
        f.write(env_content)

    print("\n" + "=" * 70)
    print("✅ Configuration saved to .env")
    print("=" * 70)

    print("\n📋 Next steps:")
    print("1. Optionally create calendar_config.yaml to override status colors")
    print("2. Run: booking-calendar --events --start-date 2024-01-01 --end-date 2024-01-31")
    print("3. Run: booking-calendar --stats")
    print()


if __name__ == "__main__":
    try:
        main()
    except KeyboardInterrupt:
        print("\n\nSetup cancelled.")
        sys.exit(0)
