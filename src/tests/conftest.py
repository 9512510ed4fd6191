import pytest

from risa_chain.crypto import CryptographyProvider
from risa_chain.crypto import RsaKeyPair
from risa_chain.models import SavedKey


@pytest.fixture(scope="session")
def rsa_key_pair() -> RsaKeyPair:
    return CryptographyProvider()._generate_key_pair_sync(2048)


@pytest.fixture()
def saved_key(rsa_key_pair: RsaKeyPair) -> SavedKey:
    return SavedKey(
        id="key-1",
        name="test key",
        public_key=rsa_key_pair.public_key,
        private_key=rsa_key_pair.private_key,
        key_size=rsa_key_pair.key_size,
    )
