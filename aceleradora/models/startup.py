from ..extensions import db
from .base import TimestampMixin


class Startup(db.Model, TimestampMixin):
    __tablename__ = "startups"
    id = db.Column(db.Integer, primary_key=True)
    founder_id = db.Column(db.Integer, db.ForeignKey("users.id"), nullable=False, index=True)
    name = db.Column(db.String(120), nullable=False)
    description = db.Column(db.Text)
    industry = db.Column(db.String(80))
    founded_year = db.Column(db.Integer)
    website = db.Column(db.String(255))
    status = db.Column(db.String(20), default="activa")  # activa/inactiva/pendiente

    members = db.relationship("Member", backref="startup", cascade="all, delete-orphan",
                              order_by="Member.id")

    def is_member(self, user):
        if user is None or not getattr(user, "is_authenticated", False):
            return False
        if self.founder_id == user.id:
            return True
        return any(m.user_id == user.id or (m.email and m.email == user.email) for m in self.members)

    def to_dict(self, with_members=False):
        d = {
            "id": self.id,
            "founderId": self.founder_id,
            "name": self.name,
            "description": self.description,
            "industry": self.industry,
            "foundedYear": self.founded_year,
            "website": self.website,
            "status": self.status,
        }
        if with_members:
            d["members"] = [m.to_dict() for m in self.members]
        return d

    def __repr__(self) -> str:
        return f"<Startup id={self.id} name={self.name!r}>"


class Member(db.Model, TimestampMixin):
    __tablename__ = "members"
    id = db.Column(db.Integer, primary_key=True)
    startup_id = db.Column(db.Integer, db.ForeignKey("startups.id"), nullable=False, index=True)
    user_id = db.Column(db.Integer, db.ForeignKey("users.id"))  # linked account, if any
    name = db.Column(db.String(120), nullable=False)
    email = db.Column(db.String(255))
    role = db.Column(db.String(80))  # cargo en la startup

    def to_dict(self):
        return {"id": self.id, "startupId": self.startup_id, "userId": self.user_id,
                "name": self.name, "email": self.email, "role": self.role}
