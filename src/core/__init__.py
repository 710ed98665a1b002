"""
Core - lógica de negócio da Gestão de Usuários.

- users: value objects de identidade (CPF, e-mail, telefone),
  agregado UsuarioEntity, DTOs, ports e use cases
- shared: exceções de domínio, Domain Events e Unit of Work

Nada aqui importa Django: os adapters (src/adapters) implementam os
ports e os testes do Core rodam sem banco.
"""
