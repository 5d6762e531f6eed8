from blobverse import db
import json


class Profile(db.Model):
    __tablename__ = 'profile'
    user_id = db.Column(db.String(64), primary_key=True)
    username = db.Column(db.String(64), nullable=False)
    wins = db.Column(db.Integer, default=0, nullable=False)
    losses = db.Column(db.Integer, default=0, nullable=False)
    last_active = db.Column(db.BigInteger, nullable=False)  # epoch milliseconds
    evolution_level = db.Column(db.Integer, default=0, nullable=False)

    def to_dict(self):
        return {
            'userId': self.user_id,
            'username': self.username,
            'wins': self.wins,
            'losses': self.losses,
            'lastActive': self.last_active,
            'evolutionLevel': self.evolution_level,
        }


class BattleRecord(db.Model):
    __tablename__ = 'battle'
    id = db.Column(db.String(64), primary_key=True)
    player1 = db.Column(db.String(64), db.ForeignKey('profile.user_id'), nullable=False)
    player2 = db.Column(db.String(64), db.ForeignKey('profile.user_id'), nullable=False)
    winner = db.Column(db.String(64), db.ForeignKey('profile.user_id'), nullable=True)
    date = db.Column(db.BigInteger, nullable=False, index=True)  # epoch milliseconds
    moves = db.Column(db.Text, nullable=False)  # JSON-encoded ordered list

    @property
    def move_list(self):
        return json.loads(self.moves) if self.moves else []

    @move_list.setter
    def move_list(self, value):
        self.moves = json.dumps(list(value))

    def to_dict(self):
        return {
            'id': self.id,
            'player1': self.player1,
            'player2': self.player2,
            'winner': self.winner,
            'date': self.date,
            'moves': self.move_list,
        }
