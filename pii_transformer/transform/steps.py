from pii_transformer.cipher.base import BaseCipher
from pii_transformer.cipher.exceptions import CipherError
from pii_transformer.digest.sha256 import hash_text
from pii_transformer.logging.logger import Log
from pii_transformer.transform.models import (
    DECRYPTION_ERROR,
    ENCRYPTION_ERROR,
    PGP_DECRYPTED,
    PGP_ENCRYPTED,
    SHA256_HASHED,
    CipherFailure,
    CipherOutcome,
    CipherSuccess,
)
from pii_transformer.transform.pipeline import PipelineStep, TransformContext


class _CipherStep(PipelineStep):
    """Runs one cipher call and records its outcome without raising.

    A failed call still counts as an executed stage; the failure is shown
    inline as ``[<FAILURE_MARKER>: <message>]``.
    """

    SUCCESS_LABEL: str
    ERROR_LABEL: str
    FAILURE_MARKER: str

    def __init__(self, cipher: BaseCipher) -> None:
        self._cipher = cipher

    def run(self, context: TransformContext) -> TransformContext:
        outcome = self.attempt(context.original_text, context.passphrase)
        context.outcome = outcome
        if isinstance(outcome, CipherSuccess):
            context.transformed_text = outcome.text
            context.labels.append(self.SUCCESS_LABEL)
        else:
            context.transformed_text = f"[{self.FAILURE_MARKER}: {outcome.message}]"
            context.labels.append(self.ERROR_LABEL)
        context.stage_count += 1
        return context

    def attempt(self, text: str, passphrase: str | None) -> CipherOutcome:
        try:
            return CipherSuccess(self._call(text, passphrase))
        except CipherError as exc:
            Log.error(f"{self.FAILURE_MARKER.replace('_', ' ').capitalize()}: {exc}")
            return CipherFailure(kind=exc.kind, message=str(exc))

    def _call(self, text: str, passphrase: str | None) -> str:
        raise NotImplementedError


class DecryptStep(_CipherStep):
    SUCCESS_LABEL = PGP_DECRYPTED
    ERROR_LABEL = DECRYPTION_ERROR
    FAILURE_MARKER = "DECRYPTION_FAILED"

    def _call(self, text: str, passphrase: str | None) -> str:
        return self._cipher.decrypt(text, passphrase)


class EncryptStep(_CipherStep):
    SUCCESS_LABEL = PGP_ENCRYPTED
    ERROR_LABEL = ENCRYPTION_ERROR
    FAILURE_MARKER = "ENCRYPTION_FAILED"

    def _call(self, text: str, passphrase: str | None) -> str:
        return self._cipher.encrypt(text, passphrase)


class DigestStep(PipelineStep):
    def run(self, context: TransformContext) -> TransformContext:
        context.hashed_text = hash_text(context.transformed_text)
        context.labels.append(SHA256_HASHED)
        context.stage_count += 1
        Log.debug(f"Hashed {len(context.transformed_text)} chars")
        return context
