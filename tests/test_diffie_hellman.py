from respotcore.diffie_hellman import DH_PRIME, DHLocalKeys


def test_prime_size():
    assert DH_PRIME.bit_length() == 96 * 8


def test_private_key_one_gives_generator():
    keys = DHLocalKeys(1)
    assert keys.public_key() == b"\x02"


def test_private_key_one_shared_secret_is_remote():
    keys = DHLocalKeys(1)
    remote = bytes(range(1, 40))
    assert keys.shared_secret(remote) == remote


def test_shared_secret_agrees():
    alice = DHLocalKeys.random()
    bob = DHLocalKeys.random()
    secret_a = alice.shared_secret(bob.public_key())
    secret_b = bob.shared_secret(alice.public_key())
    assert secret_a == secret_b
    assert len(secret_a) <= 96


def test_public_key_within_prime():
    keys = DHLocalKeys.random()
    assert 0 < int.from_bytes(keys.public_key(), "big") < DH_PRIME


def test_random_keys_differ():
    public_keys = {DHLocalKeys.random().public_key() for _ in range(3)}
    assert len(public_keys) == 3


def test_shared_secret_different_peers_differ():
    alice = DHLocalKeys.random()
    bob = DHLocalKeys.random()
    carol = DHLocalKeys.random()
    shared = {
        alice.shared_secret(bob.public_key()),
        alice.shared_secret(carol.public_key()),
    }
    assert len(shared) == 2