API_TAG = '@api'
UI_TAG = '@ui'

DEFAULT_RUNTIME_LOG = 'tmp/parallel_runtime_test.log'
DEFAULT_ALLOWED_MISSING_PERCENT = 50

# Default weight for items that carry no size of their own.
DEFAULT_WEIGHT = 1

SPECIFY_GROUP_SEPARATOR = '|'
SPECIFY_ITEM_SEPARATOR = ','

option_keys = (
  'single_process',
  'single_process_tag',
  'isolate',
  'isolate_count',
  'specify_groups',
  'ignore_tag_pattern',
  'runtime_log',
  'allowed_missing_percent',
)
