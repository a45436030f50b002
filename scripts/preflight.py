"""Pre-flight check: verify env vars, the encryption key and Supabase access before deploy.

Usage:
    uv run python scripts/preflight.py
    uv run python scripts/preflight.py --generate-key   # print a new EMAIL_ENCRYPTION_KEY

Checks:
  1. Required env vars are set
  2. EMAIL_ENCRYPTION_KEY is well-formed and round-trips
  3. Tables used by the guard and the email connection store are reachable
"""

import argparse
import asyncio
import os
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from dotenv import load_dotenv

load_dotenv()

from core.exceptions import AppError  # noqa: E402
from core.log import configure_logging  # noqa: E402
from db.credential_cipher import CredentialCipher, generate_key  # noqa: E402

_REQUIRED_VARS = [
    "SUPABASE_URL",
    "SUPABASE_SERVICE_ROLE_KEY",
    "EMAIL_ENCRYPTION_KEY",
]

_OPTIONAL_VARS = [
    "SUPABASE_ANON_KEY",
    "LOG_LEVEL",
]

_TABLES = ["workspace_members", "email_scan_configs"]

passed = 0
failed = 0
warnings = 0


def ok(msg: str) -> None:
    global passed
    passed += 1
    print(f"  [OK] {msg}")


def fail(msg: str) -> None:
    global failed
    failed += 1
    print(f"  [FAIL] {msg}")


def warn(msg: str) -> None:
    global warnings
    warnings += 1
    print(f"  [WARN] {msg}")


def check_env_vars() -> None:
    """Check required and optional env vars."""
    print("\n1. Environment variables")
    for var in _REQUIRED_VARS:
        if os.environ.get(var):
            ok(f"{var} is set")
        else:
            fail(f"{var} is MISSING")

    for var in _OPTIONAL_VARS:
        if os.environ.get(var):
            ok(f"{var} is set")
        else:
            warn(f"{var} not set (optional)")


def check_encryption_key() -> None:
    """Encrypt and decrypt a probe value with the configured key."""
    print("\n2. Encryption key")
    cipher = CredentialCipher()
    try:
        probe = "preflight-probe"
        if cipher.decrypt(cipher.encrypt(probe)) == probe:
            ok("EMAIL_ENCRYPTION_KEY round-trips")
        else:
            fail("EMAIL_ENCRYPTION_KEY round-trip mismatch")
    except AppError as e:
        fail(e.message)


async def check_tables() -> None:
    """Check that the service-role key can read the tables we depend on."""
    import httpx

    print("\n3. Supabase tables")
    url = os.environ.get("SUPABASE_URL", "").rstrip("/")
    key = os.environ.get("SUPABASE_SERVICE_ROLE_KEY", "")
    if not (url and key):
        fail("SUPABASE_URL or SUPABASE_SERVICE_ROLE_KEY not set — skipping")
        return
    async with httpx.AsyncClient() as client:
        for table in _TABLES:
            try:
                resp = await client.get(
                    f"{url}/rest/v1/{table}?select=id&limit=1",
                    headers={"apikey": key, "Authorization": f"Bearer {key}"},
                    timeout=10,
                )
                if resp.status_code == 200:
                    ok(f"{table} reachable")
                else:
                    fail(f"{table} returned {resp.status_code}: {resp.text[:100]}")
            except httpx.HTTPError as e:
                fail(f"{table} check failed: {e}")


async def main() -> None:
    configure_logging(os.environ.get("LOG_LEVEL", "INFO"))

    print("=" * 60)
    print("Ultimate To-Do OS -- Pre-flight Check")
    print("=" * 60)

    check_env_vars()
    check_encryption_key()
    await check_tables()

    print("\n" + "=" * 60)
    print(f"Results: {passed} passed, {failed} failed, {warnings} warnings")
    if failed:
        print("STATUS: NOT READY -- fix failures above before deploy")
        sys.exit(1)
    elif warnings:
        print("STATUS: READY with warnings (optional settings missing)")
    else:
        print("STATUS: ALL CLEAR -- ready to deploy!")


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[0])
    parser.add_argument("--generate-key", action="store_true", help="print a fresh EMAIL_ENCRYPTION_KEY and exit")
    args = parser.parse_args()
    if args.generate_key:
        print(generate_key())
    else:
        asyncio.run(main())
