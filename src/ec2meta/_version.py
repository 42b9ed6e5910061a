# SPDX-FileCopyrightText: 2026 The ec2meta Authors
# SPDX-License-Identifier: Apache-2.0

"""Dynamic version from package metadata."""

from __future__ import annotations

try:
    from importlib.metadata import version

    __version__: str = version("ec2meta")
except Exception:
    __version__ = "0.0.0.dev0"
