# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

"""Account registration, login and stateless session tokens for the game service."""

__version__ = "0.1.0"
