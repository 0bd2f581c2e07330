"""Tests for request building and execution."""

import unittest
from unittest.mock import MagicMock

from deviceiam.protocol import (
    IamRequest,
    IamResponse,
    InvalidIdentifierError,
    Method,
    execute_request,
    user_path,
    user_role_path,
    validate_identifier,
)


class TestPaths(unittest.TestCase):
    """Test path composition."""

    def test_user_path(self):
        """Test the single user path."""
        self.assertEqual(user_path("alice"), "/iam/users/alice")

    def test_user_role_path(self):
        """Test the role attachment path."""
        self.assertEqual(user_role_path("alice", "admin"), "/iam/users/alice/roles/admin")

    def test_identifiers_are_not_escaped(self):
        """Test that valid identifiers are inserted verbatim."""
        self.assertEqual(
            user_role_path("alice.smith-2", "Role_A%"), "/iam/users/alice.smith-2/roles/Role_A%"
        )


class TestValidateIdentifier(unittest.TestCase):
    """Test identifier validation."""

    def test_valid_identifier(self):
        """Test that ordinary identifiers are returned unchanged."""
        self.assertEqual(validate_identifier("admin"), "admin")

    def test_empty_identifier(self):
        """Test that empty identifiers are rejected."""
        with self.assertRaises(InvalidIdentifierError):
            validate_identifier("")
        with self.assertRaises(InvalidIdentifierError):
            validate_identifier(None)

    def test_path_breaking_characters(self):
        """Test that separators, query and fragment markers are rejected."""
        for value in ("a/b", "a?b", "a#b", "a b", "a\tb", "a\x00b"):
            with self.assertRaises(InvalidIdentifierError, msg=value):
                validate_identifier(value)

    def test_error_names_the_kind(self):
        """Test that the error says which identifier is wrong."""
        with self.assertRaises(InvalidIdentifierError) as ctx:
            user_role_path("alice", "ad/min")
        self.assertIn("role id", str(ctx.exception))

    def test_invalid_identifier_is_value_error(self):
        """Test that callers can catch ValueError."""
        self.assertTrue(issubclass(InvalidIdentifierError, ValueError))


class TestExecuteRequest(unittest.TestCase):
    """Test sending a request through the connection."""

    def test_execute_request(self):
        """Test that method and path reach the connection."""
        connection = MagicMock()
        raw = MagicMock(status_code=205, payload=bytearray(b"\x80"))
        connection.create_request.return_value.execute.return_value = raw

        response = execute_request(connection, IamRequest(Method.GET, "/iam/roles"))

        connection.create_request.assert_called_once_with("GET", "/iam/roles")
        self.assertEqual(response, IamResponse(205, b"\x80"))
        self.assertIsInstance(response.payload, bytes)

    def test_execute_request_without_payload(self):
        """Test that a missing payload stays None."""
        connection = MagicMock()
        connection.create_request.return_value.execute.return_value = IamResponse(202)

        response = execute_request(connection, IamRequest(Method.DELETE, "/iam/users/bob"))

        connection.create_request.assert_called_once_with("DELETE", "/iam/users/bob")
        self.assertIsNone(response.payload)

    def test_execute_request_propagates_errors(self):
        """Test that connection errors are left to the caller."""
        connection = MagicMock()
        connection.create_request.side_effect = RuntimeError("not connected")

        with self.assertRaises(RuntimeError):
            execute_request(connection, IamRequest(Method.PUT, "/iam/users/a/roles/b"))


if __name__ == "__main__":
    unittest.main()
