import math
from typing import Any, Dict, List, Optional


def format_time(seconds: float) -> str:
    """Whole seconds left, rounded up, as shown on a player's region."""
    # Tick drift (8.000000000000002) must not read as an extra second
    return str(math.ceil(round(max(0, seconds), 6)))


def can_jump_in(state: Dict[str, Any], player_index: int) -> bool:
    """Whether a region should be offered as a jump-in target.

    Affordance only: GameSession.jump_in stays the authority and must still
    be called when the player selects the region.
    """
    if state.get('phase') != 'playing' or state.get('grace_period_active'):
        return False
    times = state.get('player_times') or []
    jumps = state.get('jump_in_counts') or []
    if not 0 <= player_index < len(times) or player_index == state.get('current_speaker'):
        return False
    return jumps[player_index] > 0 and times[player_index] > 0


def _display_time(state: Dict[str, Any], player_index: int) -> Optional[str]:
    seconds = state['player_times'][player_index]
    if state['phase'] != 'paused' and state['grace_period_active'] and player_index != state['current_speaker']:
        # Other clocks are hidden while the new speaker is protected
        return None
    return format_time(seconds)


def _row(state: Dict[str, Any], i: int) -> Dict[str, Any]:
    phase = state['phase']
    is_speaker = i == state['current_speaker']
    grayed_out = phase == 'playing' and not is_speaker and state['grace_period_active']
    no_jumps_left = phase == 'playing' and not is_speaker and state['jump_in_counts'][i] <= 0
    no_time_left = phase in ('playing', 'paused') and state['player_times'][i] <= 0
    return {
        'index': i,
        'is_speaker': is_speaker,
        'display_time': _display_time(state, i),
        'jump_ins': state['jump_in_counts'][i],
        'can_jump_in': can_jump_in(state, i),
        'grayed_out': grayed_out,
        'no_jumps_left': no_jumps_left,
        'no_time_left': no_time_left,
        'selectable': phase in ('playing', 'paused') and not no_jumps_left and not no_time_left,
    }


def player_views(state: Dict[str, Any]) -> List[Dict[str, Any]]:
    """Per-player rows for rendering a snapshot.

    In the menu there is no running game; one empty row per configured
    player is returned so clients can still lay out the regions. A region
    is drawn dimmed when any of grayed_out, no_jumps_left or no_time_left
    is set.
    """
    if state.get('phase') == 'menu':
        count = int(state['settings']['player_count'])
        return [
            {'index': i, 'is_speaker': False, 'display_time': None, 'jump_ins': None, 'can_jump_in': False,
             'grayed_out': False, 'no_jumps_left': False, 'no_time_left': False, 'selectable': False}
            for i in range(count)
        ]
    return [_row(state, i) for i in range(len(state['player_times']))]
