# Copyright (c) 2023 Samuel J. McKelvie
#
# MIT License - See LICENSE file accompanying this package.
#

"""Package roku_client discovers Roku media players on the local network and controls them
   through their External Control Protocol (ECP) HTTP API.
"""

# The following line is automatically updated with "semantic-release version"
__version__ =  "1.0.0"


__all__ = [ '__version__' ]
