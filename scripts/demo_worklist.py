#!/usr/bin/env python3
"""Demo: a pharmacy worklist reacting to user actions and push events.

Runs entirely in memory once the package is installed
(``pip install -e .``). A fake backend serves the initial list, the
pharmacist prepares and delivers a prescription, and other stations push
changes that the worklist merges in.
"""

import asyncio

from pharmacy_worklist.models.view import WorklistView
from pharmacy_worklist.services.worklist import PharmacyWorklist
from pharmacy_worklist.utils.config import Config

BACKEND = [
    {"id": 1, "token": 101, "name": "Alice Moreau", "age": 34, "gender": "F",
     "prescription": "Amoxicillin 500mg x 7 days", "status": "pharmacy"},
    {"id": 2, "token": 102, "name": "Bob Tan", "age": 61, "gender": "M",
     "prescription": "Metformin 850mg", "status": "pharmacy"},
]


async def fetch_prescriptions() -> list[dict]:
    return list(BACKEND)


def render(view: WorklistView) -> None:
    c = view.counts
    print(f"  pending={c.pending} prepared={c.prepared} delivered={c.delivered}")
    for item in view.items:
        print(f"    #{item.token} {item.name:<14} {item.effective_state.value.upper()}")


async def main():
    worklist = PharmacyWorklist(Config(hospital_id="demo"), fetch_prescriptions, render=render)

    async def transport(event: dict) -> None:
        print(f"  -> {event['type']} {event['payload']}")

    worklist.outbound.subscribe("*", transport)

    print("=" * 60)
    print("Pharmacy Worklist Demo")
    print("=" * 60)

    print("\n[startup]")
    await worklist.start()

    print("\n[pharmacist] Mark Alice prepared")
    await worklist.prepare(1)

    print("\n[doctor] New prescription for Chen")
    await worklist.push("worklist-item-changed", {"item": {
        "id": 3, "token": 103, "name": "Chen Wei", "age": 45, "gender": "M",
        "prescription": "Ibuprofen 400mg", "status": "pharmacy"}})

    print("\n[doctor] Bob's prescription withdrawn")
    await worklist.push("worklist-item-changed", {"item": {
        "id": 2, "token": 102, "name": "Bob Tan", "prescription": "", "status": "consultation"}})

    print("\n[pharmacist] Deliver to Alice")
    await worklist.deliver(1)

    print("\n[pharmacist] Search 'ch'")
    worklist.set_search("ch")

    await worklist.stop()
    print("\n" + "=" * 60)


if __name__ == "__main__":
    asyncio.run(main())
