# -*- Python -*-

import os
import shutil

import lit.formats

# Configuration file for the 'lit' test runner.

# name: The name of this test suite.
config.name = 'gasprof'

# testFormat: The test format to use to interpret tests.
config.test_format = lit.formats.ShTest(True)

# suffixes: A list of file extensions to treat as test files.
config.suffixes = ['.test']

# test_source_root: The root path where tests are located.
config.test_source_root = os.path.dirname(__file__)

# test_exec_root: The root path where tests should be run.
config.test_exec_root = os.path.join(config.test_source_root, 'Output')

# Find gasprof
if hasattr(config, 'gasprof') and config.gasprof:
    gasprof_path = config.gasprof
else:
    gasprof_path = shutil.which('gasprof') or 'gasprof'
config.substitutions.append(('%gasprof', gasprof_path))

# Test directories
config.substitutions.append(('%S', config.test_source_root))
config.substitutions.append(('%{inputs}', os.path.join(config.test_source_root, 'Inputs')))

# Add 'not' command
not_path = shutil.which('not')
if not not_path:
    # Try common locations
    for path in ['/usr/local/opt/llvm/bin', '/opt/homebrew/opt/llvm/bin', '/usr/bin']:
        candidate = os.path.join(path, 'not')
        if os.path.exists(candidate):
            not_path = candidate
            break
if not_path:
    config.substitutions.append(('not', not_path))

# Find and add FileCheck
filecheck_path = shutil.which('FileCheck')
if not filecheck_path:
    for path in ['/usr/local/opt/llvm/bin', '/opt/homebrew/opt/llvm/bin', '/usr/bin']:
        candidate = os.path.join(path, 'FileCheck')
        if os.path.exists(candidate):
            filecheck_path = candidate
            break
# If FileCheck is not found, tests will fail but we'll let lit report it
config.substitutions.append(('FileCheck', filecheck_path or 'FileCheck'))

# Colors off so FileCheck sees plain text
config.environment['NO_COLOR'] = '1'
