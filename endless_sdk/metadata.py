# Copyright © Endless
# Parts of the project are originally copyright © Aptos Foundation
# SPDX-License-Identifier: Apache-2.0

import importlib.metadata as metadata

# constants
PACKAGE_NAME = "endless-sdk"


class Metadata:
    """Represents the metadata related to the SDK sent to the node in header during API call.

    The main objective of this is to provide additional information to the node to track the source of the incoming
    requests.
    """

    ENDLESS_HEADER = "x-endless-client"

    @staticmethod
    def get_endless_header_val():
        version = metadata.version(PACKAGE_NAME)
        return f"endless-python-sdk/{version}"
