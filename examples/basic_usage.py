"""
AMEE API Python Client - Basic Usage Example

This example demonstrates the basic usage of the AMEE API client.
"""

import json
import logging

from amee_api import (
    AMEEClient,
    AMEEConfig,
    AMEEError,
    AuthenticationError,
    ConnectionError,
)


def main():
    """Fetch the profile list and one data category."""
    logging.basicConfig(level=logging.DEBUG)

    # Initialize client
    client = AMEEClient(AMEEConfig(
        project_key="your-project-key",
        project_password="your-project-password",
        host="stage.amee.com",
        debug=True,
    ))

    try:
        profiles = json.loads(client.get("/profiles"))
        print(f"Profiles: {profiles.get('pager', {}).get('items', 0)}")

        data = client.get("/data/home/energy/quantity", {"itemsPerPage": "10"})
        print(f"Data category: {json.loads(data).get('path')}")
    except AuthenticationError as e:
        print(f"Check the project key and password: {e.message}")
    except ConnectionError as e:
        print(f"API unreachable: {e.message}")
    except AMEEError as e:
        print(f"Error: {e.code} - {e.message}")


if __name__ == "__main__":
    main()
