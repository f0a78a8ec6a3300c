#!/usr/bin/env python3
"""Example: Quickstart — plandoc

Minimal working example: read and rewrite a plan's frontmatter, edit a
bold field, and look up a roadmap phase.

Usage:
    python examples/01_quickstart.py

Requirements:
    pip install plandoc
"""
from __future__ import annotations

import plandoc

PLAN = """---
phase: 01-foundation
plan: 01
wave: 1
depends_on: []
---

# Plan 01

**Status:** Draft
"""

ROADMAP = """# Roadmap

- [ ] **Phase 1: Foundation** - Set up project
- [ ] **Phase 10: Polish** - Final touches

### Phase 1: Foundation
**Goal:** Set up project infrastructure
**Success Criteria** (what must be TRUE):
  1. Repository builds

### Phase 10: Polish
**Goal:** Final touches
"""


def main() -> None:
    print(f"plandoc version: {plandoc.__version__}")

    # Step 1: Parse the frontmatter and bump the wave
    meta = plandoc.parse_frontmatter(PLAN)
    doc = plandoc.splice_frontmatter(PLAN, meta.with_entry("wave", plandoc.Scalar("2")))
    print("Rewritten frontmatter:")
    print(plandoc.serialize_frontmatter(plandoc.parse_frontmatter(doc)))

    # Step 2: Edit a bold field; the rest of the body is untouched
    doc = plandoc.replace_field(doc, "Status", "Ready to execute") or doc
    print(f"\nStatus is now: {plandoc.extract_field(doc, 'Status')}")

    # Step 3: Look up a phase; "1" never matches Phase 10
    lookup = plandoc.get_phase(ROADMAP, "001")
    print(f"\nPhase {lookup.phase_number}: {lookup.phase_name}")
    print(f"  goal: {lookup.goal}")
    for criterion in lookup.success_criteria:
        print(f"  - {criterion}")


if __name__ == "__main__":
    main()
