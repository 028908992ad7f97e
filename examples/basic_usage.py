#!/usr/bin/env python3
"""
Basic Usage Example - Fractional Location Ledger

This script walks one owner through the life of a location stake using the
text gateway. It shows how to:
- Build a ledger from configuration
- Create owners and locations
- Fund an owner and trade fractions of a location
- Inspect holdings and supply conservation

Run: python examples/basic_usage.py
"""

from fractional_ledger.ledger import build_ledger


def print_state(ledger) -> None:
    """Print owners, locations and holdings."""
    core = ledger.core
    for owner in core.list_owners():
        print(f"  👤 {owner.name}: cash ${owner.cash:.2f}")
    for location in core.list_locations():
        print(f"  🏠 {location.name}: price ${location.price:.2f}, "
              f"{location.available_fraction:.2%} available")
    for holding in core.list_holdings():
        print(f"  📄 {holding.owner_ref} holds {holding.own_percentage:.2%} "
              f"of {holding.location_ref} (${holding.capital_amount:.2f})")


def main():
    """Run the walkthrough."""
    print("🚀 Fractional Ledger - Basic Usage Example")
    print("=" * 50)

    with build_ledger(overrides={"storage": {"backend": "memory"}}) as ledger:
        gateway = ledger.gateway

        steps = [
            gateway.create_owner("Alice"),
            gateway.create_owner("Bob"),
            gateway.create_location("L1", 1000),
            gateway.topup_cash("Alice", 1000),
            gateway.topup_cash("Bob", 300),
            gateway.buy_location("Alice", "L1", 400),
            gateway.buy_location("Bob", "L1", 500),
            gateway.buy_location("Bob", "L1", 250),
            gateway.sell_location("Alice", "L1", 100),
            gateway.withdraw_cash("Alice", 50),
        ]

        for message in steps:
            print(f"➡️  {message}")

        print("\n📊 Ledger state:")
        print_state(ledger)

        report = ledger.core.check_conservation("L1")
        print(f"\n⚖️  L1 conservation: available {report.available_fraction:.4f} + "
              f"held {report.held_fraction:.4f} (balanced: {report.balanced})")


if __name__ == "__main__":
    main()
