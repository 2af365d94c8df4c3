"""
Copyright (C) 2026 Garudex Labs.  All Rights Reserved.
ODataProxy, a product of Garudex Labs

Command-line interface for ODataProxy.
"""
