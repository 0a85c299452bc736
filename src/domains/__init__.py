# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Domain services layer for the registrar engine.

This package contains domain services that encapsulate business logic.
Each domain module talks to persistence only through a repository
protocol, so the rules can run against any store.

Domains:
    enrollment: Enrollment lifecycle, credit-hour accounting and
        duplicate reconciliation.
    grading: Assessment scoring, GPA mapping and cumulative GPA.
"""
