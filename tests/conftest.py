from collections.abc import Callable

import pytest

from pii_transformer.cipher.openpgp_adapter import OpenPgpSymmetricAdapter
from pii_transformer.transform.steps import DecryptStep, DigestStep, EncryptStep
from pii_transformer.transform.transformer import Transformer

AdapterFactory = Callable[..., OpenPgpSymmetricAdapter]


def _counting_random_bytes() -> Callable[[int], bytes]:
    state = {"next": 0}

    def _random_bytes(size: int) -> bytes:
        start = state["next"]
        state["next"] += size
        return bytes((start + i) % 256 for i in range(size))

    return _random_bytes


@pytest.fixture()
def make_adapter() -> AdapterFactory:
    """Build adapters with the cheapest S2K count; extra kwargs override."""

    def _make(**kwargs: object) -> OpenPgpSymmetricAdapter:
        kwargs.setdefault("s2k_count", 1024)
        return OpenPgpSymmetricAdapter(**kwargs)  # type: ignore[arg-type]

    return _make


@pytest.fixture()
def make_fixed_adapter(make_adapter: AdapterFactory) -> AdapterFactory:
    """Build adapters whose output depends only on their inputs."""

    def _make(**kwargs: object) -> OpenPgpSymmetricAdapter:
        kwargs.setdefault("random_bytes", _counting_random_bytes())
        kwargs.setdefault("clock", lambda: 1_700_000_000.0)
        return make_adapter(**kwargs)

    return _make


@pytest.fixture()
def fast_adapter(make_adapter: AdapterFactory) -> OpenPgpSymmetricAdapter:
    """Adapter with real randomness and a cheap S2K count."""
    return make_adapter()


@pytest.fixture()
def transformer(fast_adapter: OpenPgpSymmetricAdapter) -> Transformer:
    digest = DigestStep()
    return Transformer(
        forward_steps=[DecryptStep(fast_adapter), digest],
        backward_steps=[EncryptStep(fast_adapter), digest],
    )
