from flask import Blueprint, jsonify, request
from blobverse.services import records as svc

records = Blueprint('records', __name__)


@records.route('/profiles/<string:user_id>', methods=['GET'])
def get_profile(user_id):
    profile = svc.get_profile(user_id)
    if not profile:
        return jsonify({'error': 'Profile not found'}), 404
    return jsonify(profile.to_dict())


@records.route('/profiles/<string:user_id>', methods=['PUT'])
def save_profile(user_id):
    data = request.get_json(silent=True) or {}
    if not data.get('username'):
        return jsonify({'error': 'username is required'}), 400
    data['userId'] = user_id
    try:
        profile = svc.save_profile(data)
    except (TypeError, ValueError):
        return jsonify({'error': 'wins, losses and evolutionLevel must be integers'}), 400
    return jsonify(profile.to_dict())


@records.route('/battles', methods=['POST'])
def record_battle():
    data = request.get_json(silent=True) or {}
    if not all([data.get('player1'), data.get('player2')]):
        return jsonify({'error': 'player1 and player2 are required'}), 400
    if not isinstance(data.get('moves', []), list):
        return jsonify({'error': 'moves must be a list'}), 400
    battle_id = svc.record_battle(data)
    return jsonify({'id': battle_id}), 201


@records.route('/battles/recent', methods=['GET'])
def recent_battles():
    return jsonify([b.to_dict() for b in svc.get_recent_battles()])
