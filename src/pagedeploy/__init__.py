"""Build a static documentation site and publish it to a deployment branch."""
