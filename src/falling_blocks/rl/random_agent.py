from __future__ import annotations

import argparse

import gymnasium as gym

import falling_blocks.env  # noqa: F401
from falling_blocks.env.wrappers import ResampleBlockedMoveWrapper


def run_random(steps: int = 1000, seed: int | None = None) -> float:
    env = ResampleBlockedMoveWrapper(gym.make("FallingBlocks-10x20-v0"))
    obs, info = env.reset(seed=seed)
    env.action_space.seed(seed)
    total_reward = 0.0
    episodes = 1
    for _ in range(steps):
        action = env.action_space.sample(mask=info["action_mask"].astype("int8"))
        obs, reward, terminated, truncated, info = env.step(action)
        total_reward += float(reward)
        if terminated or truncated:
            episodes += 1
            obs, info = env.reset()
    env.close()
    print(f"Random agent cleared {total_reward:.0f} rows over {episodes} episode(s)")
    return total_reward


def main() -> None:
    p = argparse.ArgumentParser()
    p.add_argument("--steps", type=int, default=1000)
    p.add_argument("--seed", type=int, default=None)
    args = p.parse_args()
    run_random(args.steps, args.seed)


if __name__ == "__main__":  # pragma: no cover
    main()
