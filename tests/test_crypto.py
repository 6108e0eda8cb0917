import unittest

from ivycli.core import crypto
from ivycli.core.errors import CryptoError

from .test_base import TEST_ITERATIONS


class TestCrypto(unittest.TestCase):
    def seal(self, data=b"secret turns", passphrase="pw"):
        return crypto.encrypt(data, passphrase, iterations=TEST_ITERATIONS)

    def open(self, blob, passphrase="pw"):
        return crypto.decrypt(blob, passphrase, iterations=TEST_ITERATIONS)

    def test_round_trip(self):
        """Data sealed with a passphrase opens with the same passphrase"""
        self.assertEqual(self.open(self.seal(b"hello")), b"hello")

    def test_blob_layout(self):
        blob = self.seal(b"abc")
        self.assertEqual(
            len(blob), crypto.SALT_SIZE + crypto.NONCE_SIZE + 3 + crypto.TAG_SIZE
        )

    def test_fresh_salt_and_nonce_every_time(self):
        first = self.seal(b"same")
        second = self.seal(b"same")
        header = crypto.SALT_SIZE + crypto.NONCE_SIZE
        self.assertNotEqual(first[:crypto.SALT_SIZE], second[:crypto.SALT_SIZE])
        self.assertNotEqual(first[crypto.SALT_SIZE:header], second[crypto.SALT_SIZE:header])
        self.assertNotEqual(first, second)

    def test_wrong_passphrase(self):
        with self.assertRaises(CryptoError):
            self.open(self.seal(passphrase="right"), passphrase="wrong")

    def test_short_blob(self):
        for size in (0, 15, crypto.SALT_SIZE + crypto.NONCE_SIZE):
            with self.assertRaises(CryptoError):
                self.open(b"\x00" * size)

    def test_any_flipped_byte_is_rejected(self):
        blob = self.seal(b'[{"role": "user", "content": "hi"}]')
        for i in range(len(blob)):
            tampered = bytearray(blob)
            tampered[i] ^= 0x01
            with self.assertRaises(CryptoError, msg=f"byte {i}"):
                self.open(bytes(tampered))

    def test_derived_key_is_256_bits(self):
        key = crypto.derive_key("pw", b"\x00" * crypto.SALT_SIZE, TEST_ITERATIONS)
        self.assertEqual(len(key), 32)


if __name__ == "__main__":
    unittest.main()
