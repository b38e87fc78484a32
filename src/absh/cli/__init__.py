# Copyright (c) Syntropy Systems
"""absh command line interface."""
