from flask import Blueprint, current_app, jsonify

main = Blueprint('main', __name__)


@main.route('/')
def index():
    return jsonify({'message': 'Welcome to the Blobverse battle server!'})


@main.route('/api/status')
def status():
    return jsonify(current_app.extensions['battle_server'].stats())
