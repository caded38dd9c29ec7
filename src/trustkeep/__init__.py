# SPDX-License-Identifier: MIT
# Copyright (c) 2026 Ourochronos Contributors

"""TrustKeep - delegated access lists for owned resources.

An owner grants trustees access to everything they own. Grants are kept
in a bounded, disk-backed cache with one file per owner, and adds are
two-phase (propose, then confirm or cancel) unless configured otherwise.

Layout:
  core   - config, logging, exceptions, LRU primitives
  trust  - trust store, file codec, identity capability, messages, controller
  cli    - the ``trustkeep`` command

CLI entry point: ``trustkeep``
"""

__version__ = "1.0.0"
