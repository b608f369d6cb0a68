# Runtime settings, read from the environment / .env
import os

from dotenv import load_dotenv

load_dotenv()  # reads .env in project root

# Sampling window [min, max) for "rotate parameters" and new private keys.
# Widen it for a stronger demo; trial division keeps it slow past ~12 digits.
PRIME_RANGE_MIN = int(os.getenv("DH_PRIME_MIN", "10000"))
PRIME_RANGE_MAX = int(os.getenv("DH_PRIME_MAX", "99999"))

KDF_ITERATIONS = int(os.getenv("DH_KDF_ITERATIONS", "100000"))
LOG_LEVEL = os.getenv("DH_LOG_LEVEL", "WARNING").upper()

if PRIME_RANGE_MIN < 2 or PRIME_RANGE_MIN >= PRIME_RANGE_MAX:
    raise ValueError(
        f"DH_PRIME_MIN/DH_PRIME_MAX must satisfy 2 <= min < max, "
        f"got [{PRIME_RANGE_MIN}, {PRIME_RANGE_MAX})"
    )
