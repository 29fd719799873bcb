#!/usr/bin/env python3
"""
Basic usage example for the Conjur API Python client
"""

import logging

from conjur_api import (
    AuthnClient,
    ClientConfig,
    Credentials,
    CredentialsAuth,
    DirectoryClient,
    Endpoints,
    SecretsClient,
)


def main():
    logging.basicConfig(level=logging.INFO)

    # Configure client
    config = ClientConfig(timeout=30, verify_ssl=True, log_requests=True)
    endpoints = Endpoints.from_appliance_url("https://conjur.example.com")

    # Log in with a password; the token is renewed when it is rejected
    authn = AuthnClient(endpoints, config=config)
    auth = CredentialsAuth(Credentials(login="admin", password="your-password-here"), authn)

    with authn, DirectoryClient(endpoints, auth, config=config) as directory:
        # Create a user unless the login is already taken
        if not directory.user_exists("alice"):
            user = directory.create_user("alice")
            print(f"Created user: {user.login}")

        # Create a variable and store two versions
        variable = directory.create_variable("Secret Question")
        variable.add_value("first answer")
        variable.add_value("second answer")
        print(f"Created variable: {variable.id}")

        print(f"Latest value: {variable.get_value()}")
        print(f"First value: {directory.get_variable_value(variable.id, version=1)}")

    # The secrets service is a separate endpoint
    with SecretsClient.from_credentials("admin", "your-password-here", endpoints, config) as secrets:
        secrets.add_secret("prod/db/password", "super-secret-password")
        print(f"Secret: {secrets.retrieve_secret('prod/db/password')}")


if __name__ == "__main__":
    main()
