#!/usr/bin/env python3

# Copyright (c) 2023 Samuel J. McKelvie
#
# MIT License - See LICENSE file accompanying this package.
#

"""
Logging for the NEC projector REST server.
"""

from __future__ import annotations

import logging

logger = logging.getLogger('nec_projector.rest_server')
