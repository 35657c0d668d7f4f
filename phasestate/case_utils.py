# phasestate/case_utils.py
"""
Locating case configs: a case is a folder under cases/ holding a config.yml
(or config.yaml) that describes one phase.
"""
import os

CONFIG_NAMES = ('config.yml', 'config.yaml')


def case_configs(cases_dir='cases'):
    """
    Map every case folder in `cases_dir` to its config file.

    Folders without a config file are not cases and are left out.

    Returns:
        dict: case name -> config path, sorted by name
    """
    if not os.path.isdir(cases_dir):
        return {}

    configs = {}
    for entry in sorted(os.listdir(cases_dir)):
        for config_name in CONFIG_NAMES:
            config_path = os.path.join(cases_dir, entry, config_name)
            if os.path.isfile(config_path):
                configs[entry] = config_path
                break
    return configs


def resolve_config_path(case_or_path, cases_dir='cases'):
    """Config path for a case name, or `case_or_path` itself when it is a file.

    Raises:
        FileNotFoundError: neither a file nor a case under `cases_dir`
    """
    if os.path.isfile(case_or_path):
        return case_or_path
    configs = case_configs(cases_dir)
    if case_or_path not in configs:
        available = ', '.join(configs) or 'none'
        raise FileNotFoundError(f"No config file or case named '{case_or_path}' in {cases_dir} "
                                f"(available cases: {available})")
    return configs[case_or_path]
