# social_api/repositories/groups.py

from typing import Iterable, List, Optional

from social_api.models.group import ChatGroup, ChatGroupMember
from social_api.repositories.base import Repository, store_operation


class GroupRepository(Repository):

    @store_operation
    def get(self, group_id: str) -> Optional[ChatGroup]:
        return self.db.get(ChatGroup, group_id)

    @store_operation
    def create(self, *, group_id: str, name: str, image: Optional[str], created_by: str,
               member_ids: Iterable[str]) -> ChatGroup:
        group = ChatGroup(id=group_id, name=name, created_by=created_by)
        if image:
            group.image = image
        group.member_links = [ChatGroupMember(user_id=user_id) for user_id in dict.fromkeys(member_ids)]
        self.db.add(group)
        self.db.commit()
        self.db.refresh(group)
        return group

    @store_operation
    def list_for_member(self, user_id: str) -> List[ChatGroup]:
        return (
            self.db.query(ChatGroup)
            .join(ChatGroupMember, ChatGroupMember.group_id == ChatGroup.id)
            .filter(ChatGroupMember.user_id == user_id)
            .order_by(ChatGroup.created_at)
            .all()
        )

    @store_operation
    def update(self, group: ChatGroup, name: Optional[str] = None, image: Optional[str] = None) -> ChatGroup:
        if name is not None:
            group.name = name
        if image is not None:
            group.image = image
        self.db.add(group)
        self.db.commit()
        self.db.refresh(group)
        return group
