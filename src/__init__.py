"""Registrar engine.

Enrollment lifecycle and academic accounting for a school administration
system: credit-hour reservation, duplicate enrollment reconciliation,
weighted assessment scoring and cumulative GPA.

Copyright (C) 2025 Global Digital Labs (gdlabs.io)
SPDX-License-Identifier: LGPL-3.0-or-later
"""

__version__ = "0.1.0"
