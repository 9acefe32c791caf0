from __future__ import annotations

from collections.abc import Iterator

import pytest

from bytefmt.core.encoder_hex import HEX
from bytefmt.settings import set_active_encoder


@pytest.fixture(autouse=True)
def _hex_is_active() -> Iterator[None]:
    # Every test starts from the process default and may not leak its choice.
    set_active_encoder(HEX)
    yield
    set_active_encoder(HEX)
