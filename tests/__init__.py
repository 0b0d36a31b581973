import unittest

# Modules collected by `python -m unittest discover`.

ALLOWED_TEST_MODULES = [
	'tests.test_data_stream_name',
	'tests.test_bulk_encoder',
	'tests.test_es_client',
	'tests.test_data_stream_bootstrap',
	'tests.test_data_stream_output',
	'tests.test_config_loader',
	'tests.test_logger_setup',
	'tests.test_bootstrap_script',
]


def load_tests(loader: unittest.TestLoader, tests: unittest.TestSuite, pattern: str) -> unittest.TestSuite:
	suite = unittest.TestSuite()
	for mod_name in ALLOWED_TEST_MODULES:
		module = __import__(mod_name, fromlist=['*'])
		suite.addTests(loader.loadTestsFromModule(module))
	return suite
