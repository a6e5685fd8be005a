"""Channels nsdebug itself reports on.

nsdebug debugs itself through its own engine: ``DEBUG=nsdebug:*`` shows
what the CLI and the default store are doing.

Usage:
    from nsdebug.channels import NSDEBUG_CHANNELS, format_channel_list
"""

from nsdebug.lib.filter_lib import STORE_CHANNEL


NSDEBUG_CHANNELS = {
    STORE_CHANNEL:     'Rule reloads on the default store',
    'nsdebug:config':  'Spec resolution (cli / env / project)',
    'nsdebug:cli':     'Command dispatch',
}


def format_channel_list() -> str:
    """Format nsdebug's own channels for --list-channels."""
    lines = ["nsdebug channels:"]
    max_name = max(len(name) for name in NSDEBUG_CHANNELS)
    for name in sorted(NSDEBUG_CHANNELS):
        lines.append(f"  {name:<{max_name}}  {NSDEBUG_CHANNELS[name]}")
    return "\n".join(lines)
