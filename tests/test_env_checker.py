import numpy as np
import pytest

from envcore import Env, logger, spaces
from envcore.utils.env_checker import check_env, check_space_limit, data_equivalence


class CoinEnv(Env[np.ndarray, np.int64]):
    max_episode_steps = 10

    def __init__(self, *, seed=None, rng_factory=None):
        super().__init__(seed=seed)
        self.action_space = spaces.Discrete(2)
        self.observation_space = spaces.Box(-1.0, 1.0, shape=(1,))
        self.rng_factory = rng_factory

    def _rng(self):
        return self.np_random if self.rng_factory is None else self.rng_factory()

    def _reset(self, *, options=None):
        return np.array([self._rng().uniform(-1.0, 1.0)], dtype=np.float32), {}

    def _step(self, action):
        obs = np.array([self._rng().uniform(-1.0, 1.0)], dtype=np.float32)
        return obs, float(action), bool(obs[0] > 0.9), False, {}


@pytest.mark.parametrize(
    "data_1, data_2, expected",
    [
        (1, 1, True),
        (1, 1.0, False),
        (np.array([1.0, 2.0]), np.array([1.0, 2.0]), True),
        (np.array([1.0, 2.0]), np.array([1.0, 2.0], dtype=np.float32), False),
        (np.array([1.0]), np.array([1.0, 2.0]), False),
        (np.array([np.nan]), np.array([np.nan]), True),
        ({"a": 1, "b": (1, 2)}, {"a": 1, "b": (1, 2)}, True),
        ({"a": 1}, {"b": 1}, False),
        ((1, 2), (1, 2, 3), False),
        ([np.int64(1)], [np.int64(2)], False),
    ],
)
def test_data_equivalence(data_1, data_2, expected):
    assert data_equivalence(data_1, data_2) is expected


def test_data_equivalence_exact():
    assert data_equivalence(np.array([1.0]), np.array([1.0 + 1e-9]))
    assert not data_equivalence(np.array([1.0]), np.array([1.0 + 1e-9]), exact=True)


def test_check_env_passes():
    check_env(CoinEnv())


def test_check_env_after_reset():
    env = CoinEnv(seed=0)
    env.reset()
    check_env(env, seed=12)


def test_check_env_detects_unseeded_randomness():
    env = CoinEnv(rng_factory=np.random.default_rng)
    with pytest.raises(AssertionError, match="non-deterministic"):
        check_env(env)


def test_check_env_rejects_non_env():
    with pytest.raises(AssertionError, match="must inherit"):
        check_env(object())


def test_check_env_rejects_closed_env():
    env = CoinEnv()
    env.close()
    with pytest.raises(AssertionError, match="closed"):
        check_env(env)


def test_check_space_limit_warns_for_unnormalised_actions():
    with pytest.warns(UserWarning, match="symmetric and normalized"):
        check_space_limit(spaces.Box(-3.0, 3.0, shape=(2,)), "action")


def test_check_space_limit_warns_for_degenerate_dimension():
    space = spaces.Dict(pos=spaces.Box(np.zeros(2, dtype=np.float32), np.array([0.0, 1.0], dtype=np.float32)))
    with pytest.warns(UserWarning, match="equal low and high"):
        check_space_limit(space, "observation")


def test_logger_level_silences_warnings(recwarn):
    try:
        logger.set_level(logger.ERROR)
        check_space_limit(spaces.Box(-3.0, 3.0, shape=(2,)), "action")
    finally:
        logger.set_level(logger.WARN)
    assert len(recwarn) == 0


def test_logger_info_and_debug(capsys):
    try:
        logger.set_level(logger.DEBUG)
        logger.debug("seeded with %s", 3)
        logger.info("ready")
    finally:
        logger.set_level(logger.WARN)
    err = capsys.readouterr().err
    assert "DEBUG: seeded with 3" in err
    assert "INFO: ready" in err


def test_logger_error_is_printed(capsys):
    logger.error("failed to close %s", "env")
    assert "ERROR: failed to close env" in capsys.readouterr().err


def test_logger_messages_without_args_keep_percent_signs(capsys):
    with pytest.warns(UserWarning, match="100% done"):
        logger.warn("100% done")
    try:
        logger.set_level(logger.DEBUG)
        logger.info("50% ready")
        logger.debug("25%s")
    finally:
        logger.set_level(logger.WARN)
    logger.error("disk 90% full")
    err = capsys.readouterr().err
    assert "INFO: 50% ready" in err
    assert "DEBUG: 25%s" in err
    assert "ERROR: disk 90% full" in err
