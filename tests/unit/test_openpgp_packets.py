import bz2
import zlib

import pytest
from cryptography.hazmat.decrepit.ciphers.algorithms import Camellia
from cryptography.hazmat.primitives.ciphers.algorithms import AES

from pii_transformer.cipher.openpgp.constants import (
    CompressionAlgorithm,
    HashAlgorithm,
    PacketTag,
    S2KType,
    SymmetricAlgorithm,
)
from pii_transformer.cipher.openpgp.exceptions import IntegrityError, PacketError
from pii_transformer.cipher.openpgp.packets import (
    LiteralData,
    RawPacket,
    SymmetricKeyEncryptedSessionKey,
    decompress,
    decrypt_integrity_protected,
    encrypt_integrity_protected,
    read_packets,
    write_packet,
)
from pii_transformer.cipher.openpgp.s2k import S2K

KEY = bytes(range(32))
PREFIX = bytes(range(100, 116))


class TestWritePacket:
    def test_one_octet_length(self) -> None:
        assert write_packet(11, b"x" * 191)[:2] == b"\xcb\xbf"

    def test_two_octet_length(self) -> None:
        assert write_packet(11, b"x" * 192)[:3] == b"\xcb\xc0\x00"
        assert write_packet(11, b"x" * 8383)[:3] == b"\xcb\xdf\xff"

    def test_five_octet_length(self) -> None:
        assert write_packet(11, b"x" * 8384)[:6] == b"\xcb\xff\x00\x00\x20\xc0"

    @pytest.mark.parametrize("size", [0, 191, 192, 8383, 8384])
    def test_read_inverts_write(self, size: int) -> None:
        body = bytes(i % 256 for i in range(size))
        assert read_packets(write_packet(18, body)) == [RawPacket(tag=18, body=body)]


class TestReadPackets:
    def test_reads_consecutive_packets(self) -> None:
        data = write_packet(3, b"one") + write_packet(18, b"two")
        assert [p.tag for p in read_packets(data)] == [3, 18]

    def test_reads_old_format_one_octet_length(self) -> None:
        data = bytes([0x80 | (11 << 2) | 0, 3]) + b"abc"
        assert read_packets(data) == [RawPacket(tag=11, body=b"abc")]

    def test_reads_old_format_two_octet_length(self) -> None:
        data = bytes([0x80 | (8 << 2) | 1, 0, 3]) + b"abc"
        assert read_packets(data) == [RawPacket(tag=8, body=b"abc")]

    def test_reads_old_format_four_octet_length(self) -> None:
        data = bytes([0x80 | (8 << 2) | 2, 0, 0, 0, 2]) + b"ab"
        assert read_packets(data) == [RawPacket(tag=8, body=b"ab")]

    def test_reads_old_format_indeterminate_length(self) -> None:
        data = bytes([0x80 | (11 << 2) | 3]) + b"to the end"
        assert read_packets(data) == [RawPacket(tag=11, body=b"to the end")]

    def test_reassembles_partial_body_lengths(self) -> None:
        data = b"\xcb" + b"\xe1" + b"ab" + b"\xe0" + b"c" + b"\x02" + b"de"
        assert read_packets(data) == [RawPacket(tag=11, body=b"abcde")]

    def test_rejects_header_without_high_bit(self) -> None:
        with pytest.raises(PacketError, match="Invalid packet header 0x41"):
            read_packets(b"A")

    def test_rejects_truncated_body(self) -> None:
        with pytest.raises(PacketError, match="Truncated packet"):
            read_packets(b"\xcb\x05ab")

    def test_rejects_truncated_length(self) -> None:
        with pytest.raises(PacketError, match="Truncated packet header"):
            read_packets(b"\xcb\xc5")


class TestSessionKeyPacket:
    def test_parses_header_produced_by_common_tools(self) -> None:
        body = bytes([4, 7, 3, 2]) + bytes(8) + bytes([0xE0])
        packet = SymmetricKeyEncryptedSessionKey.parse(body)
        assert packet.algorithm == SymmetricAlgorithm.AES128
        assert packet.s2k.hash_algorithm == HashAlgorithm.SHA1
        assert packet.encrypted_session_key == b""
        assert packet.to_bytes() == body

    def test_without_encrypted_key_uses_derived_key(self) -> None:
        s2k = S2K(S2KType.SIMPLE, HashAlgorithm.SHA256)
        packet = SymmetricKeyEncryptedSessionKey(SymmetricAlgorithm.AES256, s2k)
        algorithm, key = packet.session_key(b"pw")
        assert algorithm == SymmetricAlgorithm.AES256
        assert key == s2k.derive_key(b"pw", 32)

    def test_rejects_unknown_version(self) -> None:
        with pytest.raises(PacketError, match="version 5"):
            SymmetricKeyEncryptedSessionKey.parse(bytes([5, 9, 0, 8]))

    def test_rejects_unknown_algorithm(self) -> None:
        with pytest.raises(PacketError, match="Unsupported symmetric algorithm 3"):
            SymmetricKeyEncryptedSessionKey.parse(bytes([4, 3, 0, 8]))


class TestIntegrityProtectedData:
    def test_decrypt_inverts_encrypt(self) -> None:
        body = encrypt_integrity_protected(SymmetricAlgorithm.AES256, KEY, b"packets", PREFIX)
        assert body[0] == 1
        assert decrypt_integrity_protected(SymmetricAlgorithm.AES256, KEY, body) == b"packets"

    @pytest.mark.parametrize(
        ("algorithm", "primitive"),
        [
            (SymmetricAlgorithm.AES128, AES),
            (SymmetricAlgorithm.AES256, AES),
            (SymmetricAlgorithm.CAMELLIA128, Camellia),
            (SymmetricAlgorithm.CAMELLIA256, Camellia),
        ],
    )
    def test_primitive_matches_algorithm(
        self, algorithm: SymmetricAlgorithm, primitive: type
    ) -> None:
        cipher = algorithm.primitive(bytes(algorithm.key_size))
        assert isinstance(cipher, primitive)
        assert cipher.key_size == algorithm.key_size * 8

    def test_camellia_round_trip(self) -> None:
        key = KEY[:16]
        body = encrypt_integrity_protected(SymmetricAlgorithm.CAMELLIA128, key, b"data", PREFIX)
        assert decrypt_integrity_protected(SymmetricAlgorithm.CAMELLIA128, key, body) == b"data"

    def test_wrong_key_fails(self) -> None:
        body = encrypt_integrity_protected(SymmetricAlgorithm.AES256, KEY, b"packets", PREFIX)
        with pytest.raises(IntegrityError):
            decrypt_integrity_protected(SymmetricAlgorithm.AES256, bytes(32), body)

    def test_tampering_is_detected(self) -> None:
        body = bytearray(
            encrypt_integrity_protected(SymmetricAlgorithm.AES256, KEY, b"packets", PREFIX)
        )
        body[20] ^= 0x01
        with pytest.raises(IntegrityError):
            decrypt_integrity_protected(SymmetricAlgorithm.AES256, KEY, bytes(body))

    def test_rejects_unknown_version(self) -> None:
        with pytest.raises(PacketError, match="version"):
            decrypt_integrity_protected(SymmetricAlgorithm.AES256, KEY, b"\x02" + bytes(64))

    def test_rejects_short_body(self) -> None:
        with pytest.raises(PacketError, match="too short"):
            decrypt_integrity_protected(SymmetricAlgorithm.AES256, KEY, b"\x01" + bytes(10))

    def test_requires_one_block_prefix(self) -> None:
        with pytest.raises(ValueError, match="16 bytes"):
            encrypt_integrity_protected(SymmetricAlgorithm.AES256, KEY, b"x", b"short")


class TestLiteralData:
    def test_from_text_uses_crlf_and_utf8(self) -> None:
        literal = LiteralData.from_text("a\nż", timestamp=7)
        assert literal.data == "a\r\nż".encode("utf-8")
        assert literal.format == "u"

    def test_serialized_layout(self) -> None:
        literal = LiteralData(data=b"hi", format="b", filename=b"f.txt", timestamp=1)
        assert literal.to_bytes() == b"b\x05f.txt\x00\x00\x00\x01hi"
        assert LiteralData.parse(literal.to_bytes()) == literal

    def test_text_formats_restore_lf(self) -> None:
        literal = LiteralData.parse(b"t\x00\x00\x00\x00\x00line1\r\nline2")
        assert literal.text() == "line1\nline2"

    def test_binary_format_keeps_crlf(self) -> None:
        literal = LiteralData.parse(b"b\x00\x00\x00\x00\x00line1\r\nline2")
        assert literal.text() == "line1\r\nline2"

    def test_text_preserves_lone_carriage_returns(self) -> None:
        original = "a\r\nb\rc"
        assert LiteralData.parse(LiteralData.from_text(original).to_bytes()).text() == original

    def test_rejects_invalid_utf8(self) -> None:
        with pytest.raises(PacketError, match="UTF-8"):
            LiteralData.parse(b"u\x00\x00\x00\x00\x00\xff\xfe").text()

    def test_rejects_truncated_header(self) -> None:
        with pytest.raises(PacketError):
            LiteralData.parse(b"u\x04ab")


class TestDecompress:
    def test_uncompressed(self) -> None:
        assert decompress(bytes([CompressionAlgorithm.UNCOMPRESSED]) + b"raw") == b"raw"

    def test_zip_is_raw_deflate(self) -> None:
        compressor = zlib.compressobj(wbits=-15)
        payload = compressor.compress(b"inner packets") + compressor.flush()
        assert decompress(bytes([CompressionAlgorithm.ZIP]) + payload) == b"inner packets"

    def test_zlib(self) -> None:
        assert decompress(bytes([CompressionAlgorithm.ZLIB]) + zlib.compress(b"abc")) == b"abc"

    def test_bzip2(self) -> None:
        assert decompress(bytes([CompressionAlgorithm.BZIP2]) + bz2.compress(b"abc")) == b"abc"

    def test_corrupt_payload_raises(self) -> None:
        with pytest.raises(PacketError, match="Decompression failed"):
            decompress(bytes([CompressionAlgorithm.ZLIB]) + b"not zlib")

    def test_unknown_algorithm_raises(self) -> None:
        with pytest.raises(PacketError, match="Unsupported compression algorithm 9"):
            decompress(b"\x09abc")

    def test_empty_body_raises(self) -> None:
        with pytest.raises(PacketError, match="Empty"):
            decompress(b"")


def test_mdc_tag_matches_packet_numbering() -> None:
    assert 0xC0 | PacketTag.MDC == 0xD3
