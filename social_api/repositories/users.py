# social_api/repositories/users.py

from typing import Iterable, List, Optional, Set

from sqlalchemy.exc import IntegrityError

from social_api.models.user import User, Friendship, ProfileUpdate
from social_api.repositories.base import Repository, store_operation


class UserRepository(Repository):

    @store_operation
    def get(self, user_id: str) -> Optional[User]:
        return self.db.get(User, user_id)

    @store_operation
    def find_by_email(self, email: str) -> Optional[User]:
        return self.db.query(User).filter(User.email == email).first()

    @store_operation
    def create(self, *, user_id: str, full_name: str, email: str, hashed_password: str) -> User:
        db_user = User(
            id=user_id,
            full_name=full_name,
            email=email,
            hashed_password=hashed_password,
        )
        self.db.add(db_user)
        self.db.commit()
        self.db.refresh(db_user)
        return db_user

    @store_operation
    def update(self, db_user: User, changes: ProfileUpdate) -> User:
        if changes.full_name is not None:
            db_user.full_name = changes.full_name
        if changes.bio is not None:
            db_user.bio = changes.bio
        if changes.profile_picture is not None:
            db_user.profile_picture = changes.profile_picture
        if changes.school is not None:
            db_user.school = changes.school
        if changes.college is not None:
            db_user.college = changes.college
        if changes.relationship_status is not None:
            db_user.relationship_status = changes.relationship_status.value

        self.db.add(db_user)
        self.db.commit()
        self.db.refresh(db_user)
        return db_user

    @store_operation
    def list_by_ids(self, user_ids: Iterable[str]) -> List[User]:
        ids = list(set(user_ids))
        if not ids:
            return []
        return self.db.query(User).filter(User.id.in_(ids)).all()

    @store_operation
    def list_all_except(self, excluded_ids: Iterable[str]) -> List[User]:
        query = self.db.query(User)
        excluded = list(set(excluded_ids))
        if excluded:
            query = query.filter(User.id.notin_(excluded))
        return query.order_by(User.created_at, User.id).all()

    # --- friend sets ---

    @store_operation
    def friend_ids(self, user_id: str) -> Set[str]:
        rows = self.db.query(Friendship.friend_id).filter(Friendship.user_id == user_id).all()
        return {row[0] for row in rows}

    @store_operation
    def has_friend(self, user_id: str, friend_id: str) -> bool:
        link = self.db.get(Friendship, (user_id, friend_id))
        return link is not None

    @store_operation
    def add_friend(self, user_id: str, friend_id: str) -> bool:
        """
        Put friend_id into user_id's friend set.

        Adding a member that is already there is a no-op, so the call is safe
        to repeat. Returns True only when a new link was written.
        """
        if self.db.get(Friendship, (user_id, friend_id)) is not None:
            return False
        self.db.add(Friendship(user_id=user_id, friend_id=friend_id))
        try:
            self.db.commit()
        except IntegrityError:
            # Someone else wrote the same link first
            self.db.rollback()
            return False
        return True
