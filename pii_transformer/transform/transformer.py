import asyncio
from functools import lru_cache

from pii_transformer.cipher.factory import CipherFactory
from pii_transformer.config.settings import Settings
from pii_transformer.logging.logger import Log
from pii_transformer.transform.models import TransformationResult
from pii_transformer.transform.pipeline import PipelineStep, TransformContext
from pii_transformer.transform.steps import DecryptStep, DigestStep, EncryptStep


class Transformer:
    """Runs the forward (decrypt, hash) and backward (encrypt, hash) pipelines.

    Both directions always return a TransformationResult: cipher failures are
    folded into the result, and blank input comes back unchanged.
    """

    def __init__(
        self,
        forward_steps: list[PipelineStep],
        backward_steps: list[PipelineStep],
    ) -> None:
        self._forward_steps = forward_steps
        self._backward_steps = backward_steps

    def forward(self, text: str, passphrase: str | None = None) -> TransformationResult:
        """Decrypt an envelope and hash the plaintext (or the failure marker)."""
        return self._run(self._forward_steps, text, passphrase)

    def backward(self, text: str, passphrase: str | None = None) -> TransformationResult:
        """Encrypt plaintext into an envelope and hash the envelope."""
        return self._run(self._backward_steps, text, passphrase)

    def _run(
        self,
        steps: list[PipelineStep],
        text: str,
        passphrase: str | None,
    ) -> TransformationResult:
        if not text.strip():
            return TransformationResult(original_text=text, transformed_text=text)

        context = TransformContext(original_text=text, passphrase=passphrase)
        for step in steps:
            context = step.run(context)
        Log.debug(f"Transformed {len(text)} chars: {' -> '.join(context.labels)}")
        return context.to_result()


def build_transformer(settings: Settings) -> Transformer:
    """Build a Transformer with the configured cipher adapter."""
    cipher = CipherFactory.create(settings)
    digest = DigestStep()
    return Transformer(
        forward_steps=[DecryptStep(cipher), digest],
        backward_steps=[EncryptStep(cipher), digest],
    )


@lru_cache(maxsize=1)
def default_transformer() -> Transformer:
    return build_transformer(Settings())


async def forward_transform(
    text: str,
    passphrase: str | None = None,
    transformer: Transformer | None = None,
) -> TransformationResult:
    """Decrypt-then-hash without blocking the event loop."""
    transformer = transformer or default_transformer()
    return await asyncio.to_thread(transformer.forward, text, passphrase)


async def backward_transform(
    text: str,
    passphrase: str | None = None,
    transformer: Transformer | None = None,
) -> TransformationResult:
    """Encrypt-then-hash without blocking the event loop."""
    transformer = transformer or default_transformer()
    return await asyncio.to_thread(transformer.backward, text, passphrase)
