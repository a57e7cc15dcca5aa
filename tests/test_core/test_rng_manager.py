from passevo.utils.rng_manager import RNGManager


def test_same_seed_same_stream():
    a, b = RNGManager(seed=5), RNGManager(seed=5)
    assert [a.randint(0, 100) for _ in range(20)] == [b.randint(0, 100) for _ in range(20)]


def test_state_snapshot_and_restore():
    rng = RNGManager(seed=1)
    state = rng.get_state()
    first = [rng.random() for _ in range(5)]
    rng.set_state(state)
    assert [rng.random() for _ in range(5)] == first


def test_weighted_index_respects_zero_weights():
    rng = RNGManager(seed=2)
    picks = {rng.weighted_index([0.0, 3.0, 0.0]) for _ in range(100)}
    assert picks == {1}


def test_weighted_index_all_zero_is_uniform():
    rng = RNGManager(seed=3)
    picks = {rng.weighted_index([0, 0, 0]) for _ in range(200)}
    assert picks == {0, 1, 2}
