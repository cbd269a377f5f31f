import inspect
import pathlib
import sys

import pytest

ROOT = pathlib.Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))


def test_factorize_small_and_bounded():
    from attacks.public_key_attack import FACTOR_SEARCH_BOUND, factorize

    assert FACTOR_SEARCH_BOUND == 1_000_000
    assert factorize(3233) == (53, 61)
    assert factorize(102871 * 102877) == (102871, 102877)
    assert factorize(15, bound=2) is None
    assert factorize(102871 * 102877, bound=1000) is None


def test_factorize_gives_up_above_bound():
    from attacks.public_key_attack import factorize

    assert factorize(1000003 * 1000033) is None


def test_root_attack_verifies_exact_powers():
    from attacks.public_key_attack import root_attack

    n = 1000037 * 15485867
    m = 12345
    assert root_attack(pow(m, 3, n), 3) == m
    assert root_attack(144, 2) == 12
    assert root_attack(145, 2) is None
    assert root_attack(28, 3) is None
    assert root_attack(32, 5) is None


def test_attack_recovers_plaintext_by_factoring():
    from attacks.public_key_attack import try_decrypt_with_public_key_only
    from textbook_rsa.cipher import encrypt_message
    from textbook_rsa.keygen import generate_keys
    from textbook_rsa.randomness import SeededRandomSource

    keys = generate_keys(61, 53, rng=SeededRandomSource(5))
    ciphertext = encrypt_message(b"Rust is great", keys.n, keys.e)

    result = try_decrypt_with_public_key_only(ciphertext, keys.n, keys.e)
    assert result.method == "factorization"
    assert result.factors == (53, 61)
    assert (result.private_exponent * keys.e) % (52 * 60) == 1
    assert result.plaintext == b"Rust is great"
    assert result.text == "Rust is great"
    assert result.complete


def test_attack_accepts_bare_block_lists():
    from attacks.public_key_attack import try_decrypt_with_public_key_only
    from textbook_rsa.cipher import encrypt_message
    from textbook_rsa.keygen import generate_keys
    from textbook_rsa.randomness import SeededRandomSource

    keys = generate_keys(102871, 102877, rng=SeededRandomSource(9))
    ciphertext = encrypt_message(b"attack at dawn", keys.n, keys.e)

    result = try_decrypt_with_public_key_only(list(ciphertext.blocks), keys.n, keys.e)
    assert result.plaintext == b"attack at dawn"


def test_attack_is_inconclusive_without_small_factor():
    from attacks.public_key_attack import try_decrypt_with_public_key_only
    from textbook_rsa.cipher import encrypt_message
    from textbook_rsa.errors import AttackInconclusive
    from textbook_rsa.keygen import generate_keys
    from textbook_rsa.randomness import SeededRandomSource

    keys = generate_keys(1000003, 1000033, rng=SeededRandomSource(2))
    ciphertext = encrypt_message(b"out of reach", keys.n, keys.e)

    with pytest.raises(AttackInconclusive):
        try_decrypt_with_public_key_only(ciphertext, keys.n, keys.e)


def test_cube_root_attack_on_small_plaintext():
    from attacks.public_key_attack import try_decrypt_with_public_key_only
    from textbook_rsa.cipher import encrypt_message
    from textbook_rsa.keygen import generate_keys

    keys = generate_keys(1000037, 15485867, public_exponent=3)
    plaintext = b"tiny m"
    ciphertext = encrypt_message(plaintext, keys.n, keys.e, block_size=1)
    # no wraparound: every block is an exact cube
    assert list(ciphertext.blocks) == [byte ** 3 for byte in plaintext]

    result = try_decrypt_with_public_key_only(ciphertext, keys.n, keys.e)
    assert result.method == "eth_root"
    assert result.plaintext == plaintext
    assert result.factors is None and result.private_exponent is None
    assert result.complete


def test_root_path_runs_when_factors_give_no_inverse():
    from attacks.public_key_attack import try_decrypt_with_public_key_only

    # 3 | phi(3233), so the recovered factors do not yield d for e = 3
    result = try_decrypt_with_public_key_only([8, 27], 3233, 3)
    assert result.method == "eth_root"
    assert result.plaintext == b"\x02\x03"


def test_partial_root_recovery_is_reported():
    from attacks.public_key_attack import try_decrypt_with_public_key_only
    from textbook_rsa.cipher import Ciphertext

    n = 1000037 * 15485867
    ciphertext = Ciphertext(blocks=(27, 28, 64), block_size=1, plaintext_length=3)

    result = try_decrypt_with_public_key_only(ciphertext, n, 3, bound=10)
    assert result.plaintext == b"\x03\x04"
    assert result.blocks_recovered == 2
    assert result.blocks_total == 3
    assert not result.complete


def test_root_must_fit_chunk_width():
    from attacks.public_key_attack import try_decrypt_with_public_key_only
    from textbook_rsa.cipher import Ciphertext
    from textbook_rsa.errors import AttackInconclusive

    n = 1000037 * 15485867
    # 300**3 is a perfect cube but 300 does not fit a one-byte chunk
    ciphertext = Ciphertext(blocks=(300 ** 3,), block_size=1, plaintext_length=1)
    with pytest.raises(AttackInconclusive):
        try_decrypt_with_public_key_only(ciphertext, n, 3, bound=10)


def test_attack_never_takes_private_material():
    from attacks.public_key_attack import try_decrypt_with_public_key_only

    params = set(inspect.signature(try_decrypt_with_public_key_only).parameters)
    assert params == {"ciphertext", "n", "e", "bound"}


def test_three_prime_modulus_is_inconclusive_not_a_crash():
    from attacks.public_key_attack import try_decrypt_with_public_key_only
    from textbook_rsa.cipher import Ciphertext
    from textbook_rsa.errors import AttackInconclusive

    n = 101 * 103 * 107
    blocks = tuple(pow(m, 7, n) for m in b"ABC")
    ciphertext = Ciphertext(blocks=blocks, block_size=1, plaintext_length=3)

    with pytest.raises(AttackInconclusive):
        try_decrypt_with_public_key_only(ciphertext, n, 7)


def test_mismatched_framing_falls_through_to_root_phase():
    from attacks.public_key_attack import try_decrypt_with_public_key_only
    from textbook_rsa.cipher import Ciphertext
    from textbook_rsa.errors import AttackInconclusive

    blocks = tuple(pow(m, 7, 3233) for m in b"ABC")
    # five bytes of framing but only three blocks
    ciphertext = Ciphertext(blocks=blocks, block_size=1, plaintext_length=5)

    with pytest.raises(AttackInconclusive):
        try_decrypt_with_public_key_only(ciphertext, 3233, 7)

    cubes = Ciphertext(blocks=(8, 27), block_size=1, plaintext_length=4)
    result = try_decrypt_with_public_key_only(cubes, 1000037 * 15485867, 3, bound=10)
    assert result.plaintext == b"\x02\x03"
