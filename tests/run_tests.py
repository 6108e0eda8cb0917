import unittest
import sys
import os

# Add the parent directory to the Python path so we can import the ivycli package
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

# Import all test modules
from tests.test_crypto import TestCrypto
from tests.test_history import TestHistoryStore, TestHistoryHelpers
from tests.test_conversation import TestConversation
from tests.test_config import TestConfig
from tests.test_client import TestOpenAICompletionClient
from tests.test_cli import TestChatCLI, TestMain
from tests.test_repl import TestREPL
from tests.test_provision import TestProvision
from tests.test_render import TestRenderer

if __name__ == '__main__':
    # Create a test suite with all test cases
    test_suite = unittest.TestSuite()

    # Add test cases from each module
    for case in (
        TestCrypto,
        TestHistoryStore,
        TestHistoryHelpers,
        TestConversation,
        TestConfig,
        TestOpenAICompletionClient,
        TestChatCLI,
        TestMain,
        TestREPL,
        TestProvision,
        TestRenderer,
    ):
        test_suite.addTests(unittest.TestLoader().loadTestsFromTestCase(case))

    # Run the tests
    runner = unittest.TextTestRunner(verbosity=2)
    result = runner.run(test_suite)
    sys.exit(0 if result.wasSuccessful() else 1)
