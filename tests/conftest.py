import os
import sys
from pathlib import Path

os.environ.setdefault("RPC_URL", "http://localhost:8545")
os.environ.setdefault("LEAGUE_POOL_ADDRESS", "0x" + "1" * 40)
os.environ.setdefault("POLL_INTERVAL_MINUTES", "5")

BACKEND_ROOT = Path(__file__).resolve().parents[1]
if str(BACKEND_ROOT) not in sys.path:
    sys.path.insert(0, str(BACKEND_ROOT))
