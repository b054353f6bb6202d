"""
PRUEBAS DE CAJA BLANCA - Módulo Usuarios y Login
Objetivo: Testear las ramas de validación de las rutas de usuarios
"""
import pytest
from fastapi import HTTPException
from sqlalchemy.exc import SQLAlchemyError

from agencia.auth import verify_password
from agencia.models.enums import RolUsuarioEnum
from agencia.models.usuario import Usuario as DBUsuario
from agencia.routes.usuario import create_usuario, delete_usuario, toggle_usuario, update_usuario
from agencia.schemas.usuario import UsuarioCreate, UsuarioUpdate


class TestCreateUsuarioCajaBlanca:
    """
    Rutas de ejecución:
    1. username existente → HTTPException(409)
    2. creación exitosa → contraseña hasheada
    3. error de BD → HTTPException(500)
    """

    def test_rama_1_username_duplicado(self, db_session, mock_user, crear_usuario):
        crear_usuario(username="maria")
        datos = UsuarioCreate(username="maria", name="María", email="maria@agencia.com.ar", password="secreto123")

        with pytest.raises(HTTPException) as exc_info:
            create_usuario(datos, db_session, mock_user)

        assert exc_info.value.status_code == 409

    def test_rama_2_creacion_exitosa(self, db_session, mock_user):
        datos = UsuarioCreate(
            username="pedro", name="Pedro", email="pedro@agencia.com.ar",
            password="secreto123", role=RolUsuarioEnum.manager,
        )

        result = create_usuario(datos, db_session, mock_user)

        assert result.id is not None
        assert result.role == RolUsuarioEnum.manager
        assert result.password != "secreto123"
        assert verify_password("secreto123", result.password)

    def test_rama_3_error_base_datos_rollback(self, db_session, mock_user):
        datos = UsuarioCreate(username="error", name="Error", email="error@agencia.com.ar", password="secreto123")

        original_commit = db_session.commit
        def mock_commit():
            raise SQLAlchemyError("Error simulado de BD")
        db_session.commit = mock_commit

        with pytest.raises(HTTPException) as exc_info:
            create_usuario(datos, db_session, mock_user)

        db_session.commit = original_commit

        assert exc_info.value.status_code == 500
        assert "Error al crear usuario" in str(exc_info.value.detail)


class TestAutogestionCajaBlanca:
    """Un usuario no puede eliminarse ni desactivarse a sí mismo."""

    def test_no_puede_eliminarse(self, db_session, crear_usuario):
        admin = crear_usuario(username="admin")

        with pytest.raises(HTTPException) as exc_info:
            delete_usuario(admin.id, db_session, admin)

        assert exc_info.value.status_code == 400
        assert db_session.query(DBUsuario).count() == 1

    def test_no_puede_desactivarse(self, db_session, crear_usuario):
        admin = crear_usuario(username="admin")

        with pytest.raises(HTTPException) as exc_info:
            update_usuario(admin.id, UsuarioUpdate(is_active=False), db_session, admin)
        assert exc_info.value.status_code == 400

        with pytest.raises(HTTPException):
            toggle_usuario(admin.id, db_session, admin)

    def test_desactiva_a_otro(self, db_session, crear_usuario):
        admin = crear_usuario(username="admin")
        operador = crear_usuario(username="operador", role=RolUsuarioEnum.operator)

        result = toggle_usuario(operador.id, db_session, admin)

        assert result.is_active is False

    def test_update_username_duplicado(self, db_session, crear_usuario):
        admin = crear_usuario(username="admin")
        otro = crear_usuario(username="otro")

        with pytest.raises(HTTPException) as exc_info:
            update_usuario(otro.id, UsuarioUpdate(username="admin"), db_session, admin)

        assert exc_info.value.status_code == 409

    def test_update_rehashea_password(self, db_session, crear_usuario):
        admin = crear_usuario(username="admin")
        otro = crear_usuario(username="otro")

        result = update_usuario(otro.id, UsuarioUpdate(password="nueva-clave"), db_session, admin)

        assert verify_password("nueva-clave", result.password)

    def test_eliminar_inexistente_404(self, db_session, crear_usuario):
        admin = crear_usuario(username="admin")

        with pytest.raises(HTTPException) as exc_info:
            delete_usuario(999, db_session, admin)

        assert exc_info.value.status_code == 404


class TestLogin:

    def test_login_exitoso_y_me(self, client, crear_usuario):
        crear_usuario(username="ana", role=RolUsuarioEnum.operator, password="clave-ana")

        response = client.post("/auth/login", data={"username": "ana", "password": "clave-ana"})

        assert response.status_code == 200
        token = response.json()["access_token"]
        me = client.get("/auth/me", headers={"Authorization": f"Bearer {token}"})
        assert me.status_code == 200
        assert me.json()["username"] == "ana"
        assert me.json()["role"] == "operator"
        assert "password" not in me.json()

    def test_login_password_incorrecta(self, client, crear_usuario):
        crear_usuario(username="ana", password="clave-ana")

        response = client.post("/auth/login", data={"username": "ana", "password": "otra"})

        assert response.status_code == 401

    def test_login_usuario_inactivo(self, client, crear_usuario):
        crear_usuario(username="ana", password="clave-ana", is_active=False)

        response = client.post("/auth/login", data={"username": "ana", "password": "clave-ana"})

        assert response.status_code == 401

    def test_crud_por_api(self, client, auth_headers):
        headers = auth_headers(RolUsuarioEnum.admin)

        creado = client.post("/usuarios/", json={
            "username": "nuevo", "name": "Nuevo", "email": "nuevo@agencia.com.ar", "password": "secreto123",
        }, headers=headers)
        assert creado.status_code == 201
        usuario_id = creado.json()["id"]

        listado = client.get("/usuarios/", params={"search": "nuev"}, headers=headers)
        assert [u["username"] for u in listado.json()] == ["nuevo"]

        assert client.delete(f"/usuarios/{usuario_id}", headers=headers).status_code == 204
        assert client.get(f"/usuarios/{usuario_id}", headers=headers).status_code == 404
