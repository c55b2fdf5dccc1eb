# SPDX-FileCopyrightText: 2024-present Richard Dahl <richard@dahl.us>
# SPDX-License-Identifier: MIT
# SPDX-Package-Name: relata
"""Entities and tables shared by the relation tests."""

from typing import Annotated

from sqlalchemy import Column, Integer, MetaData, String, Table

from relata import (
    Entity,
    RelationManyToMany,
    RelationManyToOne,
    RelationOneToMany,
    RelationOneToOne,
)


class Dept(Entity):
    __tablename__ = "tb_dept"

    id: int
    name: str


class Role(Entity):
    __tablename__ = "tb_role"

    id: int
    name: str


class Profile(Entity):
    __tablename__ = "tb_profile"

    id: int
    account_id: int
    bio: str


class Book(Entity):
    __tablename__ = "tb_book"

    id: int
    account_id: int
    title: str
    status: str


class Account(Entity):
    __tablename__ = "tb_account"

    id: int
    user_name: str
    dept_id: int | None = None

    dept: Annotated[Dept | None, RelationManyToOne(self_field="dept_id")] = None
    profile: Annotated[Profile | None, RelationOneToOne(target_field="account_id")] = None
    books: Annotated[
        list[Book] | None,
        RelationOneToMany(target_field="account_id", order_by="-id"),
    ] = None
    roles: Annotated[
        list[Role] | None,
        RelationManyToMany(
            join_table="tb_role_mapping",
            join_self_column="account_id",
            join_target_column="role_id",
        ),
    ] = None
    role_names: Annotated[
        list[str] | None,
        RelationManyToMany(
            target_entity=Role,
            value_field="name",
            join_table="tb_role_mapping",
            join_self_column="account_id",
            join_target_column="role_id",
        ),
    ] = None


class Reader(Entity):
    """Account rows seen through a filtered relation."""

    __tablename__ = "tb_account"

    id: int
    user_name: str

    books_by_status: Annotated[
        list[Book] | None,
        RelationOneToMany(
            target_field="account_id",
            extra_condition="status = :book_status",
            order_by="id",
        ),
    ] = None
    titles: Annotated[
        dict[int, str] | None,
        RelationOneToMany(
            target_entity=Book,
            target_field="account_id",
            value_field="title",
            map_key_field="id",
        ),
    ] = None


class Menu(Entity):
    __tablename__ = "tb_menu"

    id: int
    parent_id: int | None = None
    name: str

    children: Annotated[
        list["Menu"] | None,
        RelationOneToMany(target_field="parent_id", order_by="id"),
    ] = None


class Plain(Entity):
    __tablename__ = "tb_dept"

    id: int
    name: str


class Warehouse(Entity):
    __tablename__ = "tb_warehouse"

    id: int
    city: str


class Product(Entity):
    __tablename__ = "tb_product"

    id: int
    name: str


class OrderItem(Entity):
    __tablename__ = "tb_order_item"

    id: int
    order_id: int
    product_id: int
    warehouse_id: int

    product: Annotated[Product | None, RelationManyToOne(self_field="product_id")] = None
    warehouse: Annotated[
        Warehouse | None,
        RelationManyToOne(self_field="warehouse_id", data_source="inventory"),
    ] = None


class PurchaseOrder(Entity):
    __tablename__ = "tb_purchase_order"

    id: int
    code: str

    items: Annotated[
        list[OrderItem] | None,
        RelationOneToMany(target_field="order_id", data_source="archive", order_by="id"),
    ] = None


# Tables ---------------------------------------------------------------

main_metadata = MetaData()

Table("tb_dept", main_metadata, Column("id", Integer, primary_key=True), Column("name", String))
Table("tb_role", main_metadata, Column("id", Integer, primary_key=True), Column("name", String))
Table(
    "tb_account",
    main_metadata,
    Column("id", Integer, primary_key=True),
    Column("user_name", String),
    Column("dept_id", Integer),
)
Table(
    "tb_profile",
    main_metadata,
    Column("id", Integer, primary_key=True),
    Column("account_id", Integer),
    Column("bio", String),
)
Table(
    "tb_book",
    main_metadata,
    Column("id", Integer, primary_key=True),
    Column("account_id", Integer),
    Column("title", String),
    Column("status", String),
)
Table(
    "tb_role_mapping",
    main_metadata,
    Column("account_id", Integer),
    Column("role_id", Integer),
)
Table(
    "tb_menu",
    main_metadata,
    Column("id", Integer, primary_key=True),
    Column("parent_id", Integer),
    Column("name", String),
)
Table(
    "tb_purchase_order",
    main_metadata,
    Column("id", Integer, primary_key=True),
    Column("code", String),
)

archive_metadata = MetaData()

Table(
    "tb_order_item",
    archive_metadata,
    Column("id", Integer, primary_key=True),
    Column("order_id", Integer),
    Column("product_id", Integer),
    Column("warehouse_id", Integer),
)
Table("tb_product", archive_metadata, Column("id", Integer, primary_key=True), Column("name", String))

inventory_metadata = MetaData()

Table("tb_warehouse", inventory_metadata, Column("id", Integer, primary_key=True), Column("city", String))


MAIN_ROWS = {
    "tb_dept": [{"id": 1, "name": "R&D"}, {"id": 2, "name": "Sales"}],
    "tb_role": [{"id": 10, "name": "admin"}, {"id": 11, "name": "editor"}, {"id": 12, "name": "viewer"}],
    "tb_account": [
        {"id": 1, "user_name": "alice", "dept_id": 1},
        {"id": 2, "user_name": "bob", "dept_id": 1},
        {"id": 3, "user_name": "carol", "dept_id": 2},
        {"id": 4, "user_name": "dave", "dept_id": None},
    ],
    "tb_profile": [
        {"id": 1, "account_id": 1, "bio": "likes tea"},
        {"id": 2, "account_id": 3, "bio": "runs"},
    ],
    "tb_book": [
        {"id": 1, "account_id": 1, "title": "Alpha", "status": "published"},
        {"id": 2, "account_id": 1, "title": "Beta", "status": "draft"},
        {"id": 3, "account_id": 2, "title": "Gamma", "status": "published"},
    ],
    "tb_role_mapping": [
        {"account_id": 1, "role_id": 10},
        {"account_id": 1, "role_id": 11},
        {"account_id": 2, "role_id": 12},
    ],
    "tb_menu": [
        {"id": 1, "parent_id": None, "name": "root"},
        {"id": 2, "parent_id": 1, "name": "child-a"},
        {"id": 3, "parent_id": 1, "name": "child-b"},
        {"id": 4, "parent_id": 2, "name": "grandchild"},
        {"id": 5, "parent_id": 4, "name": "great-grandchild"},
    ],
    "tb_purchase_order": [{"id": 100, "code": "PO-100"}, {"id": 101, "code": "PO-101"}],
}

ARCHIVE_ROWS = {
    "tb_order_item": [
        {"id": 1, "order_id": 100, "product_id": 7, "warehouse_id": 70},
        {"id": 2, "order_id": 100, "product_id": 8, "warehouse_id": 70},
        {"id": 3, "order_id": 101, "product_id": 7, "warehouse_id": 71},
    ],
    "tb_product": [{"id": 7, "name": "lamp"}, {"id": 8, "name": "desk"}],
}

INVENTORY_ROWS = {
    "tb_warehouse": [{"id": 70, "city": "Oslo"}, {"id": 71, "city": "Bergen"}],
}
