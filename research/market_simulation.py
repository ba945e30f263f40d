import argparse
import logging
import numpy as np
import matplotlib
matplotlib.use("Agg")
import matplotlib.pyplot as plt
import pandas as pd
from dataclasses import dataclass, field
from typing import List, Optional
from pathlib import Path

from lending_model.src.collaborators import InMemoryCustody, InMemoryRecordStore, ListEventSink, ManualClock
from lending_model.src.config import load_config
from lending_model.src.constants import (
    FIXED_ANNUAL_RATE_WAD,
    PRICE_PRECISION,
    SECONDS_PER_YEAR,
    WAD,
)
from lending_model.src.errors import ProtocolError
from lending_model.src.logging_setup import configure_logging
from lending_model.src.program import LendingProgram
from lending_model.src.utils.interest import calculate_interest
from lending_model.src.utils.shares_math import to_assets_down

logger = logging.getLogger(__name__)

@dataclass
class ActionWeights:
    supply: float = 0.30
    withdraw: float = 0.15
    supply_collateral: float = 0.20
    withdraw_collateral: float = 0.05
    borrow: float = 0.20
    repay: float = 0.10

    def as_array(self) -> np.ndarray:
        weights = np.array([self.supply, self.withdraw, self.supply_collateral,
                            self.withdraw_collateral, self.borrow, self.repay])
        return weights / weights.sum()

@dataclass
class SimulationParams:
    num_users: int = 10
    simulation_days: int = 365
    steps_per_day: int = 4
    loan_token_mint: str = "USDC"
    collateral_token_mint: str = "SOL"
    lltv: int = 80_000_000  # 80%
    price: Optional[int] = None  # falls back to the configured oracle price
    max_action_assets: int = 10_000 * 10**6  # 10k loan units with 6 decimals
    initial_balance: int = 1_000_000 * 10**6
    random_seed: Optional[int] = None
    experiment_name: str = "default"
    weights: ActionWeights = field(default_factory=ActionWeights)

class MarketSimulation:
    """Random users acting on one market, sampled after every step"""

    ACTIONS = ("supply", "withdraw", "supply_collateral", "withdraw_collateral", "borrow", "repay")

    def __init__(self, params: SimulationParams, price: int):
        self.params = params
        self.clock = ManualClock(start=0)
        self.custody = InMemoryCustody()
        self.events = ListEventSink()
        self.program = LendingProgram(
            store=InMemoryRecordStore(),
            custody=self.custody,
            clock=self.clock,
            event_sink=self.events,
            price=price,
        )
        self.market = self.program.initialize_market(
            authority="admin",
            loan_token_mint=params.loan_token_mint,
            collateral_token_mint=params.collateral_token_mint,
            lltv=params.lltv,
        ).key
        self.users = [f"user{i}" for i in range(params.num_users)]
        for user in self.users:
            self.custody.mint(params.loan_token_mint, user, params.initial_balance)
            # collateral has 9 decimals
            self.custody.mint(params.collateral_token_mint, user, params.initial_balance * 1000)
        self.rows: List[dict] = []
        self.rejections: dict = {}
        self.rng = np.random.default_rng(params.random_seed)

    def random_action(self, user: str) -> None:
        action = self.rng.choice(self.ACTIONS, p=self.params.weights.as_array())
        amount = int(self.rng.integers(1, self.params.max_action_assets))
        try:
            if action == "supply":
                self.program.supply(self.market, user, assets=amount)
            elif action == "withdraw":
                shares = self.program.get_position(self.market, user).supply_shares
                self.program.withdraw(self.market, user, shares=max(shares // 2, 1))
            elif action == "supply_collateral":
                self.program.supply_collateral(self.market, user, amount * 1000)
            elif action == "withdraw_collateral":
                self.program.withdraw_collateral(self.market, user, amount * 1000)
            elif action == "borrow":
                self.program.borrow(self.market, user, assets=amount)
            elif action == "repay":
                self.program.repay(self.market, user, assets=amount)
        except ProtocolError as e:
            # rejected operations are part of the experiment
            name = type(e).__name__
            self.rejections[name] = self.rejections.get(name, 0) + 1
            logger.debug("%s by %s rejected: %s", action, user, e)

    def snapshot(self) -> None:
        market = self.program.get_market(self.market)
        supply_share_price = to_assets_down(10**6, market.total_supply_assets, market.total_supply_shares)
        self.rows.append({
            "time_days": self.clock.now() / 86400,
            "total_supply_assets": market.total_supply_assets,
            "total_borrow_assets": market.total_borrow_assets,
            "total_supply_shares": market.total_supply_shares,
            "total_borrow_shares": market.total_borrow_shares,
            "utilization": market.total_borrow_assets / market.total_supply_assets if market.total_supply_assets else 0.0,
            "assets_per_million_supply_shares": supply_share_price,
        })

    def simulate(self) -> pd.DataFrame:
        total_steps = self.params.simulation_days * self.params.steps_per_day
        step_seconds = 86400 // self.params.steps_per_day
        for _ in range(total_steps):
            self.clock.advance(step_seconds)
            user = self.users[int(self.rng.integers(0, len(self.users)))]
            self.random_action(user)
            self.snapshot()

            market = self.program.get_market(self.market)
            assert market.total_borrow_assets <= market.total_supply_assets, "liquidity invariant broken"
        return pd.DataFrame(self.rows)

    def plot_results(self, df: pd.DataFrame):
        output_dir = Path('research/results') / self.params.experiment_name
        output_dir.mkdir(parents=True, exist_ok=True)

        fig, (ax1, ax2) = plt.subplots(2, 1, figsize=(12, 8))

        ax1.plot(df["time_days"], df["total_supply_assets"] / 10**6, label='Total Supply')
        ax1.plot(df["time_days"], df["total_borrow_assets"] / 10**6, label='Total Borrow', color='orange')
        ax1.set_ylabel('Loan units')
        ax1.set_title('Market Totals Over Time')
        ax1.legend()
        ax1.grid(True)

        ax2.plot(df["time_days"], df["utilization"] * 100, label='Utilization', color='green')
        ax2.set_ylabel('Utilization (%)')
        ax2.set_xlabel('Time (days)')
        ax2.set_title('Utilization Over Time')
        ax2.legend()
        ax2.grid(True)

        plt.tight_layout()

        plot_name = f"users_{self.params.num_users}_lltv_{self.params.lltv}"
        if self.params.random_seed is not None:
            plot_name += f"_seed_{self.params.random_seed}"

        plt.savefig(output_dir / f"{plot_name}.png")
        plt.close()
        df.to_csv(output_dir / f"{plot_name}.csv", index=False)

def compare_linear_accrual(principal: int, horizons_days: List[int]) -> pd.DataFrame:
    """Model accrual against the float formula principal * rate * t"""
    annual_rate = FIXED_ANNUAL_RATE_WAD / WAD
    rows = []
    for days in horizons_days:
        elapsed = days * 86400
        integer_interest = calculate_interest(principal, elapsed)
        float_interest = principal * annual_rate * elapsed / SECONDS_PER_YEAR
        rows.append({
            "days": days,
            "integer_interest": integer_interest,
            "float_interest": float_interest,
            "abs_diff": abs(integer_interest - float_interest),
        })
    return pd.DataFrame(rows)

def main():
    parser = argparse.ArgumentParser(description="Randomized lending market simulation")
    parser.add_argument("--config", default=None, help="Path to a YAML config file")
    parser.add_argument("--days", type=int, default=100)
    parser.add_argument("--users", type=int, default=10)
    parser.add_argument("--seed", type=int, default=57)
    args = parser.parse_args()

    config = load_config(args.config)
    configure_logging(config.logging.level)

    params = SimulationParams(
        num_users=args.users,
        simulation_days=args.days,
        loan_token_mint=config.market.loan_token_mint,
        collateral_token_mint=config.market.collateral_token_mint,
        lltv=config.market.lltv,
        random_seed=args.seed,
        experiment_name="market_simulation",
    )
    sim = MarketSimulation(params, price=params.price or config.oracle.price)
    df = sim.simulate()
    sim.plot_results(df)

    logger.info("Final state:\n%s", df.tail(1).T)
    logger.info("Rejections: %s", sim.rejections)
    logger.info("Oracle price: %.6f", (params.price or config.oracle.price) / PRICE_PRECISION)

    logger.info("Integer vs float accrual:\n%s", compare_linear_accrual(100_000 * 10**6, [1, 30, 365]))

if __name__ == "__main__":
    main()
