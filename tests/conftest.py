import io
import sys
from pathlib import Path

import polars as pl
import pytest

# Добавляем корень репозитория в sys.path для импортов без установки пакета.
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))


@pytest.fixture
def bars_frame() -> pl.DataFrame:
    """Небольшая таблица дневных баров, как её отдаёт MoabDB."""
    return pl.DataFrame(
        {
            "time": [1704153600, 1704240000],
            "open": [185.6, 184.2],
            "high": [188.4, 185.9],
            "low": [183.9, 183.4],
            "close": [185.6, 184.3],
            "volume": [82488700, 58414500],
        }
    )


@pytest.fixture
def parquet_bytes(bars_frame: pl.DataFrame) -> bytes:
    buf = io.BytesIO()
    bars_frame.write_parquet(buf)
    return buf.getvalue()
