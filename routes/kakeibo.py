from flask import Blueprint, render_template, request, redirect, url_for, session, flash, jsonify

import kakeibo
from allocation import FUND_KEYS, FUNDS, FundAllocationInput, IncomeSource, MODE_AMOUNT, MODES, summarize
from kakeibo import KakeiboState

kakeibo_bp = Blueprint('kakeibo', __name__, url_prefix='')

SESSION_KEY = 'kakeibo'


def load_state():
    return KakeiboState.from_dict(session.get(SESSION_KEY))


def store_state(state):
    session[SESSION_KEY] = state.to_dict()


def summary_json(summary):
    return {
        'totalIncome': float(summary.total_income),
        'fundsAsAmount': {key: float(value) for key, value in summary.funds_as_amount.as_dict().items()},
        'allocatedTotal': float(summary.allocated_total),
        'remaining': float(summary.remaining),
        'stage1Errors': summary.stage1_errors,
        'stage2Errors': summary.stage2_errors,
        'canFinalize': summary.can_finalize,
    }


@kakeibo_bp.route('/')
def index():
    state = load_state()
    return render_template(
        'kakeibo.html',
        state=state,
        summary=state.summary(),
        funds=FUNDS,
        received_count=sum(1 for s in state.sources if s.received),
    )


@kakeibo_bp.route('/sources/add', methods=['POST'])
def add_source():
    name = request.form.get('name', '').strip()
    if not name:
        flash('Source name is required.', 'error')
        return redirect(url_for('kakeibo.index'))

    store_state(kakeibo.add_source(load_state(), name))
    flash(f'Added source: {name}', 'success')
    return redirect(url_for('kakeibo.index'))


@kakeibo_bp.route('/sources/<source_id>', methods=['POST'])
def edit_source(source_id):
    state = load_state()
    if kakeibo.find_source(state, source_id) is None:
        return "Source not found", 404

    received = request.form.get('received') in ('on', '1', 'true')
    store_state(kakeibo.apply_stage1_edit(state, source_id, received=received, amount=request.form.get('amount')))
    return redirect(url_for('kakeibo.index'))


@kakeibo_bp.route('/sources/<source_id>/remove', methods=['POST'])
def remove_source(source_id):
    state = load_state()
    source = kakeibo.find_source(state, source_id)
    if source is None:
        return "Source not found", 404

    store_state(kakeibo.remove_source(state, source_id))
    flash(f'Removed source: {source.name}', 'success')
    return redirect(url_for('kakeibo.index'))


@kakeibo_bp.route('/step1/save', methods=['POST'])
def save_step1():
    state = load_state()
    if state.summary().stage1_errors:
        flash('Fix Step 1 errors first.', 'error')
        return redirect(url_for('kakeibo.index'))

    store_state(kakeibo.save_stage1(state))
    flash('Step 1 saved (local only)', 'success')
    return redirect(url_for('kakeibo.index'))


@kakeibo_bp.route('/funds', methods=['POST'])
def edit_funds():
    fields = {key: request.form.get(key) for key in FUND_KEYS}
    store_state(kakeibo.apply_stage2_edit(load_state(), **fields))
    return redirect(url_for('kakeibo.index'))


@kakeibo_bp.route('/mode', methods=['POST'])
def switch_mode():
    mode = request.form.get('mode')
    if mode not in MODES:
        flash('Unknown mode.', 'error')
        return redirect(url_for('kakeibo.index'))

    store_state(kakeibo.apply_stage2_edit(load_state(), mode=mode))
    return redirect(url_for('kakeibo.index'))


@kakeibo_bp.route('/done', methods=['POST'])
def done():
    state = load_state()
    if not state.summary().can_finalize:
        flash('Fix Step 2 errors first.', 'error')
        return redirect(url_for('kakeibo.index'))

    store_state(kakeibo.finalize(state))
    flash('DONE! (local only)', 'success')
    return redirect(url_for('kakeibo.index'))


@kakeibo_bp.route('/reset', methods=['POST'])
def reset():
    store_state(kakeibo.reset(load_state()))
    flash('Reset complete', 'success')
    return redirect(url_for('kakeibo.index'))


@kakeibo_bp.route('/kakeibo/state')
def state_api():
    state = load_state()
    return jsonify(state=state.to_dict(), summary=summary_json(state.summary()))


@kakeibo_bp.route('/kakeibo/summary', methods=['POST'])
def summary_api():
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        return jsonify(error='Expected a JSON object'), 400

    sources_data = data.get('sources', [])
    if not isinstance(sources_data, list):
        return jsonify(error='sources must be a list'), 400
    funds_data = data.get('funds', {})
    if not isinstance(funds_data, dict):
        return jsonify(error='funds must be an object'), 400

    sources = [
        IncomeSource(
            id=str(s.get('id', i)),
            name=str(s.get('name', s.get('id', i))),
            received=s.get('received') is True,
            amount='' if s.get('amount') is None else str(s.get('amount')),
        )
        for i, s in enumerate(sources_data)
        if isinstance(s, dict)
    ]
    funds = FundAllocationInput(**{
        key: '' if funds_data.get(key) is None else str(funds_data.get(key))
        for key in FUND_KEYS
    })
    mode = data.get('mode') or MODE_AMOUNT
    if mode not in MODES:
        return jsonify(error=f"mode must be one of {', '.join(MODES)}"), 400

    return jsonify(summary_json(summarize(sources, funds, mode)))
